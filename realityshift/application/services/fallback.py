# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

from realityshift.infrastructure.http import RequestTimeoutError
from realityshift.shared.logging import logger

T = TypeVar("T")


async def run_with_fallback(
    primary: Callable[[], Awaitable[T]],
    fallback: Callable[[], Awaitable[T]],
    *,
    label: str,
) -> T:
    """Run ``primary``; on any failure except a deadline timeout, run ``fallback``."""

    try:
        return await primary()
    except RequestTimeoutError:
        raise
    except Exception as exc:
        logger.warning(f"{label}: primary strategy failed ({type(exc).__name__}: {exc}), using fallback")
    return await fallback()


__all__ = ["run_with_fallback"]
