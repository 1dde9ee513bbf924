# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from realityshift.domain.goals.entities import Challenge, ChallengeTemplate, DifficultyBand
from realityshift.domain.goals.repositories import ChallengeRepository, ChallengeTemplateRepository

from .streak import completion_streak


@dataclass(slots=True, frozen=True)
class ChallengeOverview:
    today: Sequence[Challenge]
    recent: Sequence[Challenge]
    streak: int


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ListChallengesUseCase:
    def __init__(
        self,
        *,
        challenges: ChallengeRepository,
        clock: Callable[[], datetime] = _utcnow,
        recent_limit: int = 30,
    ) -> None:
        self._challenges = challenges
        self._clock = clock
        self._recent_limit = recent_limit

    def execute(self, user_id: str) -> ChallengeOverview:
        today = self._clock().date()
        return ChallengeOverview(
            today=self._challenges.scheduled_on(user_id, today),
            recent=self._challenges.list_for_user(user_id, limit=self._recent_limit),
            streak=completion_streak(self._challenges, user_id, today),
        )


class ListTemplatesUseCase:
    def __init__(self, *, templates: ChallengeTemplateRepository) -> None:
        self._templates = templates

    def execute(
        self, *, domain_id: int | None = None, band: DifficultyBand = DifficultyBand.ALL
    ) -> Sequence[ChallengeTemplate]:
        return self._templates.search(domain_id=domain_id, band=band)
