# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .bounded_fetch import (
    DEFAULT_TIMEOUT_MS,
    Deadline,
    HTTPStatusError,
    RequestTimeoutError,
    fetch_json_with_deadline,
    fetch_with_deadline,
    run_with_deadline,
)

__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "Deadline",
    "HTTPStatusError",
    "RequestTimeoutError",
    "fetch_json_with_deadline",
    "fetch_with_deadline",
    "run_with_deadline",
]
