# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(slots=True, frozen=True)
class User:

    id: str
    email: str
    password_hash: str
    display_name: str | None
    created_at: datetime
    onboarding_completed: bool = False
    onboarding_data: Mapping[str, Any] | None = None


@dataclass(slots=True, frozen=True)
class UserPreferences:

    user_id: str
    display_name: str | None = None
    preferred_difficulty: int = 5
    challenges_per_day: int = 1
    reality_shift_enabled: bool = False
    preferred_challenge_time: str | None = None
    focus_areas: tuple[str, ...] = ()
    avoid_areas: tuple[str, ...] = ()
    ai_personality: str = "empathetic"
    include_scientific_basis: bool = True
    challenge_length_preference: str = "medium"
    notifications_enabled: bool = True
    daily_reminder_time: str | None = None
    streak_reminders: bool = True
    theme: str = "system"


@dataclass(slots=True, frozen=True)
class SessionClaim:
    """Identity facts carried inside a signed session token."""

    user_id: str
    email: str
    display_name: str | None
    issued_at: datetime
    expires_at: datetime
    flags: Mapping[str, bool] = field(default_factory=dict)
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_demo(self) -> bool:
        return bool(self.flags.get("isDemo", False))

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a custom claim field, boolean flags included."""
        if key in self.flags:
            return self.flags[key]
        return self.extra.get(key, default)
