# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import asyncio
import threading
from collections.abc import Coroutine
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class _Runner(Generic[T]):  # noqa: UP046
    def __init__(self, coro: Coroutine[Any, Any, T]):
        self.coro = coro
        self.out: T | None = None
        self.err: BaseException | None = None

    def run(self) -> None:
        try:
            self.out = asyncio.run(self.coro)
        except BaseException as e:  # noqa: BLE001
            self.err = e


def _has_running_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def run_async(coro: Coroutine[Any, Any, T]) -> T:  # noqa: UP047
    """Drive ``coro`` to completion from synchronous code.

    Inside a thread that already runs a loop the coroutine gets its own
    thread and loop; errors are re-raised in the caller.
    """

    if not _has_running_loop():
        return asyncio.run(coro)
    r: _Runner[T] = _Runner(coro)
    t = threading.Thread(target=r.run, daemon=True)
    t.start()
    t.join()
    if r.err:
        raise r.err
    return r.out  # type: ignore[return-value]
