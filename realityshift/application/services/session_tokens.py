# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Stateless session tokens.

A session is a signed JWT (HS256) carrying the user's identity plus any custom
claim fields, which come back from verification unchanged. Nothing is stored
server side, so a token stays valid until it expires.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

import jwt

from realityshift.domain.users.entities import SessionClaim

DEFAULT_SESSION_TTL = timedelta(days=7)

_RESERVED = frozenset({"iat", "exp", "userId", "email", "displayName"})


@dataclass(slots=True, frozen=True)
class ValidSession:
    claim: SessionClaim


@dataclass(slots=True, frozen=True)
class InvalidSession:
    reason: str


SessionResult = ValidSession | InvalidSession


class SessionCodec(Protocol):
    def sign(self, claim: Mapping[str, Any]) -> str: ...
    def verify(self, token: str | None) -> SessionResult: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtSessionCodec(SessionCodec):
    algorithm = "HS256"

    def __init__(
        self,
        secret: str,
        *,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("session secret must not be empty")
        self._secret = secret
        self._ttl = ttl
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def sign(self, claim: Mapping[str, Any]) -> str:
        issued_at = int(self._clock().timestamp())
        payload = {key: value for key, value in claim.items() if key not in ("iat", "exp")}
        payload["iat"] = issued_at
        payload["exp"] = issued_at + int(self._ttl.total_seconds())
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str | None) -> SessionResult:
        if not token:
            return InvalidSession("missing")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["iat", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            return InvalidSession("expired")
        except jwt.InvalidSignatureError:
            return InvalidSession("bad_signature")
        except jwt.InvalidTokenError:
            return InvalidSession("malformed")

        user_id = payload.get("userId")
        if not user_id:
            return InvalidSession("missing_subject")

        custom = {key: value for key, value in payload.items() if key not in _RESERVED}
        flags = {key: value for key, value in custom.items() if isinstance(value, bool)}
        extra = {key: value for key, value in custom.items() if not isinstance(value, bool)}
        return ValidSession(
            SessionClaim(
                user_id=str(user_id),
                email=str(payload.get("email") or ""),
                display_name=payload.get("displayName"),
                issued_at=datetime.fromtimestamp(payload["iat"], UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], UTC),
                flags=flags,
                extra=extra,
            )
        )


def claim_payload(
    user_id: str, email: str, display_name: str | None, **custom: Any
) -> dict[str, Any]:
    payload: dict[str, Any] = {"userId": user_id, "email": email, "displayName": display_name}
    payload.update(custom)
    return payload


__all__ = [
    "DEFAULT_SESSION_TTL",
    "InvalidSession",
    "JwtSessionCodec",
    "SessionCodec",
    "SessionResult",
    "ValidSession",
    "claim_payload",
]
