# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from realityshift.application.services.session_tokens import SessionCodec, claim_payload
from realityshift.domain.users.entities import User
from realityshift.domain.users.exceptions import InvalidCredentialsError
from realityshift.domain.users.repositories import PasswordHasher, UserRepository


class LoginUserUseCase:
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

    def execute(self, email: str, password: str) -> tuple[User, str]:
        user = self._users.find_by_email(email)
        if user is None or not self._password_hasher.verify(password, user.password_hash):
            raise InvalidCredentialsError()

        token = self._sessions.sign(claim_payload(user.id, user.email, user.display_name))
        return user, token
