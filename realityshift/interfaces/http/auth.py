# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import wraps

from flask import Response, current_app, g, request

from realityshift.application.services.session_tokens import InvalidSession
from realityshift.domain.users.entities import SessionClaim
from realityshift.shared.errors import UnauthorizedError
from realityshift.shared.logging import logger

AUTH_COOKIE = "auth_token"


def extract_token() -> str:
    auth = request.headers.get("Authorization", "")
    token = ""
    if auth.startswith("Bearer "):
        token = auth[7:]
    if not token:
        token = request.cookies.get(AUTH_COOKIE, "")
    return token


def auth_required(f):
    """Resolve the session before the view runs; anonymous callers get a 401."""

    @wraps(f)
    def inner(*a, **kw):
        codec = current_app.extensions["realityshift"].session_codec
        result = codec.verify(extract_token())
        if isinstance(result, InvalidSession):
            logger.warning(
                f"Auth failed ({result.reason}) on {request.method} {request.path} "
                f"from {request.headers.get('X-Forwarded-For', request.remote_addr)}"
            )
            raise UnauthorizedError()

        g.user_id = result.claim.user_id
        g.session_claim = result.claim
        logger.debug(f"Auth OK: user={result.claim.user_id} {request.method} {request.path}")
        return f(*a, **kw)

    return inner


def current_user_id() -> str:
    return g.user_id


def current_claim() -> SessionClaim:
    return g.session_claim


def set_session_cookie(response: Response, token: str) -> None:
    security = current_app.extensions["realityshift"].config.security
    response.set_cookie(
        AUTH_COOKIE,
        token,
        httponly=True,
        samesite=security.cookie_samesite,
        secure=bool(security.cookie_secure),
        max_age=security.session_ttl_seconds,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(AUTH_COOKIE, path="/")


__all__ = [
    "AUTH_COOKIE",
    "auth_required",
    "clear_session_cookie",
    "current_claim",
    "current_user_id",
    "extract_token",
    "set_session_cookie",
]
