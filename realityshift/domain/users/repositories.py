# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from .entities import User, UserPreferences


class UserRepository(Protocol):
    def find_by_email(self, email: str) -> User | None: ...
    def find_by_id(self, user_id: str) -> User | None: ...
    def add(self, user: User) -> User: ...
    def complete_onboarding(self, user_id: str, data: Mapping[str, Any]) -> None: ...


class PreferencesRepository(Protocol):
    def get_or_create(self, user_id: str) -> UserPreferences: ...
    def save(self, user_id: str, changes: Mapping[str, Any]) -> UserPreferences: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
