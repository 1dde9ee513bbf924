# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import Field

from .base import CamelModel


class PreferencesDTO(CamelModel):
    display_name: str | None = None
    preferred_difficulty: int | None = Field(None, ge=1, le=10)
    challenges_per_day: int | None = Field(None, ge=1, le=10)
    reality_shift_enabled: bool | None = None
    preferred_challenge_time: str | None = None
    focus_areas: list[str] | None = None
    avoid_areas: list[str] | None = None
    ai_personality: str | None = None
    include_scientific_basis: bool | None = None
    challenge_length_preference: str | None = None
    notifications_enabled: bool | None = None
    daily_reminder_time: str | None = None
    streak_reminders: bool | None = None
    theme: str | None = None

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)
