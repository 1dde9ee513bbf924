# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from realityshift.domain.goals.entities import Goal, GoalStatus
from realityshift.domain.goals.exceptions import GoalNotFoundError, InvalidGoalActionError
from realityshift.domain.goals.repositories import GoalRepository
from realityshift.shared.logging import logger

ACTIONS = ("extend", "archive", "levelup")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class GoalActionUseCase:
    """Apply a lifecycle action to one of the caller's goals.

    ``extend`` keeps the goal running (reactivating it if it was closed),
    ``archive`` shelves it and ``levelup`` completes it and opens a
    "Level 2" follow-up goal in the same domain.
    """

    def __init__(self, *, goals: GoalRepository, clock: Callable[[], datetime] = _utcnow) -> None:
        self._goals = goals
        self._clock = clock

    def execute(self, user_id: str, goal_id: str, action: str) -> Goal:
        goal = self._goals.get_for_user(goal_id, user_id)
        if goal is None:
            raise GoalNotFoundError()
        if action not in ACTIONS:
            raise InvalidGoalActionError()

        logger.info(f"goals.action: {action} goal_id={goal_id}")
        if action == "extend":
            if goal.status is GoalStatus.ACTIVE:
                return goal
            return self._goals.set_status(goal.id, GoalStatus.ACTIVE)
        if action == "archive":
            return self._goals.set_status(goal.id, GoalStatus.ARCHIVED)

        self._goals.set_status(goal.id, GoalStatus.COMPLETED)
        return self._goals.add(
            Goal(
                id="",
                user_id=user_id,
                domain_id=goal.domain_id or 1,
                title=f"{goal.title} (Level 2)",
                description=goal.description,
                started_at=self._clock(),
            )
        )
