# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Redaction applied to every log record before it reaches a sink."""

from __future__ import annotations

import re
from typing import Any

_REDACTED = "***REDACTED***"


def _rule(pattern: str, replacement: str, *, ignore_case: bool = False) -> tuple[re.Pattern[str], str]:
    return re.compile(pattern, re.IGNORECASE if ignore_case else 0), replacement


# Order matters: provider keys go first so header rules see an already masked value.
_RULES = (
    _rule(r"\bsk-(?:ant-)?[A-Za-z0-9_\-]{16,}", f"sk-{_REDACTED}"),
    _rule(r"((?:x-)?api[_-]?key\s*[:=]\s*['\"]?)[^'\"\s]{10,}", rf"\1{_REDACTED}", ignore_case=True),
    _rule(r"((?:session_)?secret\s*[:=]\s*['\"]?)[^'\"\s]{6,}", rf"\1{_REDACTED}", ignore_case=True),
    _rule(r"(authorization\s*:\s*['\"]?)(?:bearer\s+)?[^'\"\s]{10,}", rf"\1{_REDACTED}", ignore_case=True),
    _rule(r"\beyJ[\w\-]+\.[\w\-]+\.[\w\-]+", "***JWT***"),
    _rule(r"((?:auth_)?token\s*[:=]\s*['\"]?)[\w\-.]{20,}", rf"\1{_REDACTED}", ignore_case=True),
    _rule(r"(password\s*[:=]\s*['\"]?)[^'\"\s,}]+", rf"\1{_REDACTED}", ignore_case=True),
    _rule(r"\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}", "***BCRYPT***"),
    _rule(r"(\w+(?:\+\w+)?://[^:/\s]+):[^@\s]+@", rf"\1:{_REDACTED}@"),
    _rule(r"[A-Za-z0-9._%+-]+@([A-Za-z0-9.-]+\.[A-Za-z]{2,})", r"***@\1"),
)


def sanitize_message(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    """Loguru filter: rewrites the message in place and never drops the record."""
    if "message" in record:
        record["message"] = sanitize_message(record["message"])
    return True
