# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import secrets
import time

from flask import Flask, Response, g, request

from realityshift.infrastructure.observability import record_request
from realityshift.shared.logging import clear_request_id, logger, set_request_id

_MASKED_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})
_MASKED_ARGS = ("password", "token", "key", "secret")


def client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def _fingerprint(value: str) -> str:
    return f"<sha256:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"


def _debug_details() -> str:
    headers = {
        name: _fingerprint(value) if name.lower() in _MASKED_HEADERS else value
        for name, value in request.headers.items()
    }
    args = {
        name: "<redacted>" if any(word in name.lower() for word in _MASKED_ARGS) else value
        for name, value in request.args.items()
    }
    return f"query={args}, headers={headers}, body_size={request.content_length or 0}"


def configure_request_logging(app: Flask, *, debug_mode: bool = False) -> None:
    """Tags each request with an X-Request-ID, logs it, and feeds the Prometheus counters."""

    @app.before_request
    def _start() -> None:
        request_id = request.headers.get("X-Request-ID") or secrets.token_urlsafe(8)
        set_request_id(request_id)
        g.request_id = request_id
        g.request_started = time.perf_counter()

        line = f"--> {request.method} {request.path} from {client_ip()}"
        if debug_mode:
            logger.debug(f"{line} {_debug_details()}")
        else:
            logger.info(line)

    @app.after_request
    def _finish(response: Response) -> Response:
        elapsed = time.perf_counter() - g.get("request_started", time.perf_counter())
        user = f" user={g.get('user_id')}" if debug_mode else ""
        logger.info(
            f"<-- {request.method} {request.path} {response.status_code} in {elapsed * 1000:.1f}ms{user}"
        )

        route = request.url_rule.rule if request.url_rule else "unmatched"
        record_request(route, response.status_code, elapsed)

        response.headers.setdefault("X-Request-ID", g.get("request_id", "-"))
        return response

    @app.teardown_request
    def _teardown(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"Request error: {type(exc).__name__} on {request.method} {request.path}")
        clear_request_id()


__all__ = ["client_ip", "configure_request_logging"]
