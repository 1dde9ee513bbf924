# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Outbound HTTP calls bounded by a wall-clock deadline.

Every call moves through ``idle -> in-flight -> {completed, timed-out, failed}``.
The deadline cancels the in-flight task when it elapses; that cancellation
surfaces as :class:`RequestTimeoutError` so callers can tell a slow upstream
apart from a broken one. Non-2xx responses are returned as-is by
:func:`fetch_with_deadline`, and nothing here retries.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable
from typing import Any, TypeVar

import httpx

from realityshift.infrastructure.observability import record_outbound
from realityshift.shared.logging import logger

DEFAULT_TIMEOUT_MS = 30_000

T = TypeVar("T")


class RequestTimeoutError(Exception):
    def __init__(self, target: str, timeout_ms: int) -> None:
        self.target = target
        self.timeout_ms = timeout_ms
        super().__init__(f"Request to {target} timed out after {timeout_ms}ms")


class HTTPStatusError(Exception):
    def __init__(self, status_code: int, target: str | None = None) -> None:
        self.status_code = status_code
        self.target = target
        super().__init__(f"HTTP error! status: {status_code}")


class Deadline:
    """One-shot timer that cancels a task still running when it fires."""

    def __init__(self, timeout_ms: int) -> None:
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        self.timeout_ms = timeout_ms
        self.fired = False
        self._handle: asyncio.TimerHandle | None = None

    def arm(self, task: asyncio.Future[Any]) -> None:
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.timeout_ms / 1000, self._fire, task)

    def _fire(self, task: asyncio.Future[Any]) -> None:
        self._handle = None
        if task.done():
            return
        self.fired = True
        task.cancel()

    def disarm(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.cancel()

    @property
    def armed(self) -> bool:
        return self._handle is not None


async def run_with_deadline(
    awaitable: Awaitable[T],
    *,
    target: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> T:
    """Await ``awaitable`` and cancel it once ``timeout_ms`` has elapsed."""

    task = asyncio.ensure_future(awaitable)
    deadline = Deadline(timeout_ms)
    deadline.arm(task)
    started = time.perf_counter()
    try:
        result = await task
    except asyncio.CancelledError:
        if not deadline.fired:
            raise
        record_outbound("timeout", time.perf_counter() - started)
        logger.warning(f"outbound: deadline of {timeout_ms}ms elapsed for {target}")
        raise RequestTimeoutError(target, timeout_ms) from None
    except Exception as exc:
        record_outbound("failed", time.perf_counter() - started)
        logger.warning(f"outbound: {type(exc).__name__} calling {target}")
        raise
    finally:
        deadline.disarm()
    record_outbound("completed", time.perf_counter() - started)
    return result


async def fetch_with_deadline(
    target: str,
    *,
    method: str = "GET",
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    client: httpx.AsyncClient | None = None,
    **request_options: Any,
) -> httpx.Response:
    """Issue one request and return the response unchanged, whatever its status."""

    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=None)
    try:
        return await run_with_deadline(
            http.request(method, target, **request_options),
            target=target,
            timeout_ms=timeout_ms,
        )
    finally:
        if owns_client:
            await http.aclose()


async def fetch_json_with_deadline(
    target: str,
    *,
    method: str = "GET",
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    client: httpx.AsyncClient | None = None,
    **request_options: Any,
) -> Any:
    response = await fetch_with_deadline(
        target,
        method=method,
        timeout_ms=timeout_ms,
        client=client,
        **request_options,
    )
    if not response.is_success:
        raise HTTPStatusError(response.status_code, target)
    return response.json()


__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "Deadline",
    "HTTPStatusError",
    "RequestTimeoutError",
    "fetch_json_with_deadline",
    "fetch_with_deadline",
    "run_with_deadline",
]
