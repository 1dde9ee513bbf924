# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from realityshift.domain.users.entities import SessionClaim, User
from realityshift.domain.users.repositories import UserRepository
from realityshift.shared.errors import UnauthorizedError


class GetCurrentUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, claim: SessionClaim) -> User:
        # A valid token for a deleted account is still an anonymous caller
        user = self._users.find_by_id(claim.user_id)
        if user is None:
            raise UnauthorizedError()
        return user
