# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable
from functools import wraps

from flask import current_app, jsonify, request

from realityshift.shared.logging import logger

from .request_logger import client_ip


class InMemoryRateLimiter:
    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._clock = clock
        self._buckets: dict[str, deque[float]] = {}
        self._next_sweep = 0.0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._buckets)

    def _slide(self, timestamps: deque[float], now: float) -> None:
        while timestamps and (now - timestamps[0]) > self._window:
            timestamps.popleft()

    def _sweep(self, now: float) -> None:
        # Buckets idle for a whole window are dropped
        for key in [k for k, stamps in self._buckets.items() if not stamps or now - stamps[-1] > self._window]:
            del self._buckets[key]
        self._next_sweep = now + self._window

    def allow(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
            timestamps = self._buckets.setdefault(key, deque(maxlen=self._limit))
            self._slide(timestamps, now)
            if len(timestamps) >= self._limit:
                return False
            timestamps.append(now)
            return True


def _limiter_for(name: str, limit: int | None, window_seconds: float | None) -> InMemoryRateLimiter:
    limiters: dict[str, InMemoryRateLimiter] = current_app.extensions.setdefault("rate_limiters", {})
    limiter = limiters.get(name)
    if limiter is None:
        limiter = InMemoryRateLimiter(
            limit or current_app.config.get("RATE_LIMIT_REQUESTS", 10),
            window_seconds or current_app.config.get("RATE_LIMIT_WINDOW", 60.0),
        )
        limiters[name] = limiter
    return limiter


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    """Sliding-window limit per client and path.

    Limiters live on the Flask app and read ``RATE_LIMIT_ENABLED``,
    ``RATE_LIMIT_REQUESTS`` and ``RATE_LIMIT_WINDOW`` from its config at request time.
    """

    def decorator(f: Callable):
        name = f"{f.__module__}.{f.__qualname__}"

        @wraps(f)
        def wrapper(*args, **kwargs):
            if not current_app.config.get("RATE_LIMIT_ENABLED", True):
                return f(*args, **kwargs)
            limiter = _limiter_for(name, limit, window_seconds)
            key = f"{request.path}:{client_ip()}"
            if not limiter.allow(key):
                logger.warning(f"rate_limit: blocked {request.method} {request.path}")
                return jsonify({"success": False, "error": "Too many requests"}), 429
            return f(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["InMemoryRateLimiter", "rate_limit"]
