# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from realityshift.domain.users.entities import UserPreferences
from realityshift.domain.users.repositories import PreferencesRepository


class GetPreferencesUseCase:
    def __init__(self, *, preferences: PreferencesRepository) -> None:
        self._preferences = preferences

    def execute(self, user_id: str) -> UserPreferences:
        return self._preferences.get_or_create(user_id)


class SavePreferencesUseCase:
    def __init__(self, *, preferences: PreferencesRepository) -> None:
        self._preferences = preferences

    def execute(self, user_id: str, changes: Mapping[str, Any]) -> UserPreferences:
        return self._preferences.save(user_id, changes)
