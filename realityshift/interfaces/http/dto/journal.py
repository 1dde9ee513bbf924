# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import Field

from .base import CamelModel


class DiaryEntryDTO(CamelModel):
    transcript: str | None = None
    audio_duration_seconds: int | None = Field(None, ge=0)
    mood_score: int | None = Field(None, ge=1, le=10)
    goal_id: str | None = None
    challenge_id: str | None = None


class SurveyDTO(CamelModel):
    energy_level: int | None = Field(None, ge=1, le=10)
    motivation_level: int | None = Field(None, ge=1, le=10)
    overall_mood: int | None = Field(None, ge=1, le=10)
    sleep_quality: int | None = Field(None, ge=1, le=10)
    stress_level: int | None = Field(None, ge=1, le=10)
    biggest_win: str | None = None
    biggest_blocker: str | None = None
    gratitude_note: str | None = None
    tomorrow_intention: str | None = None
    completion_level: str = "minimum"
