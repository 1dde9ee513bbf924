# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from realityshift.domain.journal.entities import DailySurvey
from realityshift.domain.journal.repositories import SurveyRepository
from realityshift.shared.errors import ValidationError


@dataclass(slots=True, frozen=True)
class SurveyInput:
    energy_level: int | None
    motivation_level: int | None
    overall_mood: int | None
    sleep_quality: int | None = None
    stress_level: int | None = None
    biggest_win: str | None = None
    biggest_blocker: str | None = None
    gratitude_note: str | None = None
    tomorrow_intention: str | None = None
    completion_level: str = "minimum"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SubmitSurveyUseCase:
    """Record today's check-in. A second submission on the same day replaces the first."""

    def __init__(self, *, surveys: SurveyRepository, clock: Callable[[], datetime] = _utcnow) -> None:
        self._surveys = surveys
        self._clock = clock

    def execute(self, user_id: str, data: SurveyInput) -> DailySurvey:
        if data.energy_level is None or data.motivation_level is None or data.overall_mood is None:
            raise ValidationError("Energy, motivation, and mood are required")

        return self._surveys.upsert(
            DailySurvey(
                id="",
                user_id=user_id,
                survey_date=self._clock().date(),
                energy_level=data.energy_level,
                motivation_level=data.motivation_level,
                overall_mood=data.overall_mood,
                sleep_quality=data.sleep_quality,
                stress_level=data.stress_level,
                biggest_win=data.biggest_win,
                biggest_blocker=data.biggest_blocker,
                gratitude_note=data.gratitude_note,
                tomorrow_intention=data.tomorrow_intention,
                completion_level=data.completion_level or "minimum",
            )
        )


class ListSurveysUseCase:
    def __init__(self, *, surveys: SurveyRepository, clock: Callable[[], datetime] = _utcnow) -> None:
        self._surveys = surveys
        self._clock = clock

    def execute(self, user_id: str, *, days: int = 30) -> Sequence[DailySurvey]:
        start = self._clock().date() - timedelta(days=max(days, 0))
        return self._surveys.since(user_id, start)
