# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from realityshift.application.interfaces import ChallengeGeneratorPort
from realityshift.application.services.challenge_prompts import build_challenge_prompt
from realityshift.domain.goals.entities import Challenge, NewChallenge
from realityshift.domain.goals.exceptions import GoalNotFoundError
from realityshift.domain.goals.repositories import ChallengeRepository, GoalRepository
from realityshift.domain.users.repositories import PreferencesRepository
from realityshift.infrastructure.http import RequestTimeoutError
from realityshift.shared.errors import UpstreamTimeoutError
from realityshift.shared.logging import logger

HISTORY_SIZE = 5


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _difficulty(value: Any) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return 5
    return parsed if 1 <= parsed <= 10 else 5


class GenerateChallengeUseCase:
    """Ask the model for a fresh challenge and schedule it for tomorrow."""

    def __init__(
        self,
        *,
        goals: GoalRepository,
        preferences: PreferencesRepository,
        challenges: ChallengeRepository,
        generator: ChallengeGeneratorPort,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._goals = goals
        self._preferences = preferences
        self._challenges = challenges
        self._generator = generator
        self._clock = clock

    async def execute(self, user_id: str, goal_id: str) -> Challenge:
        goal = self._goals.get_for_user(goal_id, user_id)
        if goal is None:
            raise GoalNotFoundError()

        prefs = self._preferences.get_or_create(user_id)
        recent = self._challenges.recent_completed(user_id, limit=HISTORY_SIZE)
        prompt = build_challenge_prompt(prefs, goal, recent)

        try:
            data = await self._generator.generate_challenge(prompt)
        except RequestTimeoutError as exc:
            raise UpstreamTimeoutError(str(exc)) from exc

        challenge = self._challenges.add(
            NewChallenge(
                user_id=user_id,
                goal_id=goal.id,
                title=str(data.get("title") or "New Challenge"),
                description=str(data.get("description") or "No description provided"),
                difficulty=_difficulty(data.get("difficulty")),
                is_reality_shift=bool(data.get("isRealityShift") or False),
                scheduled_date=self._clock().date() + timedelta(days=1),
            )
        )
        logger.info(f"challenges.generate: challenge_id={challenge.id} goal_id={goal.id}")
        return challenge
