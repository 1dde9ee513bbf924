# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(slots=True, frozen=True)
class DiaryEntry:

    id: str
    user_id: str
    entry_type: str = "voice"
    transcript: str | None = None
    audio_url: str | None = None
    audio_duration_seconds: int | None = None
    mood_score: int | None = None
    ai_summary: str | None = None
    goal_id: str | None = None
    challenge_id: str | None = None
    created_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class DailySurvey:

    id: str
    user_id: str
    survey_date: date
    energy_level: int
    motivation_level: int
    overall_mood: int
    sleep_quality: int | None = None
    stress_level: int | None = None
    biggest_win: str | None = None
    biggest_blocker: str | None = None
    gratitude_note: str | None = None
    tomorrow_intention: str | None = None
    completion_level: str = "minimum"
