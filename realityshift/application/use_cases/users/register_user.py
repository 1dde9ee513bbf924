# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from realityshift.application.services.session_tokens import SessionCodec, claim_payload
from realityshift.domain.users.entities import User
from realityshift.domain.users.exceptions import UserAlreadyExistsError
from realityshift.domain.users.repositories import PasswordHasher, UserRepository


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        sessions: SessionCodec,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._sessions = sessions

    def execute(self, email: str, password: str, display_name: str | None = None) -> tuple[User, str]:
        if self._users.find_by_email(email):
            raise UserAlreadyExistsError()
        now = datetime.now(UTC)
        hashed = self._password_hasher.hash(password)
        user = User(
            id="",
            email=email,
            password_hash=hashed,
            display_name=display_name or email.split("@")[0],
            created_at=now,
        )
        # The repository also creates the default preferences row
        persisted = self._users.add(user)
        token = self._sessions.sign(
            claim_payload(persisted.id, persisted.email, persisted.display_name)
        )
        return persisted, token
