# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from realityshift.application.use_cases.challenges.streak import completion_streak
from realityshift.domain.coaching.entities import ProgressSnapshot
from realityshift.domain.goals.entities import ChallengeStatus
from realityshift.domain.goals.repositories import ChallengeRepository, GoalRepository
from realityshift.domain.journal.repositories import SurveyRepository

RECENT_CHALLENGES = 10
MOOD_WINDOW_DAYS = 7


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ProgressSnapshotBuilder:
    """Collects the facts a coach reply is grounded on."""

    def __init__(
        self,
        *,
        goals: GoalRepository,
        challenges: ChallengeRepository,
        surveys: SurveyRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._goals = goals
        self._challenges = challenges
        self._surveys = surveys
        self._clock = clock

    def build(self, user_id: str) -> ProgressSnapshot:
        now = self._clock()
        today = now.date()

        goal = self._goals.get_active(user_id)
        recent = list(self._challenges.list_for_user(user_id, limit=RECENT_CHALLENGES))
        scheduled = self._challenges.scheduled_on(user_id, today)
        surveys = self._surveys.since(user_id, today - timedelta(days=MOOD_WINDOW_DAYS))

        average_mood = None
        if surveys:
            average_mood = round(sum(s.overall_mood for s in surveys) / len(surveys), 1)

        return ProgressSnapshot(
            active_goal=goal,
            day_in_journey=goal.day_in_journey(now) if goal else 0,
            today_challenge=scheduled[0] if scheduled else None,
            completed_count=sum(1 for c in recent if c.status is ChallengeStatus.COMPLETED),
            total_challenges=len(recent),
            streak=completion_streak(self._challenges, user_id, today),
            average_mood=average_mood,
            recent_challenges=tuple(recent[:5]),
        )
