# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from realityshift.domain.goals.entities import Challenge, Goal, NewChallenge
from realityshift.domain.goals.repositories import (
    ChallengeRepository,
    ChallengeTemplateRepository,
    GoalRepository,
)
from realityshift.shared.logging import logger

FIRST_CHALLENGE_MAX_DIFFICULTY = 4


@dataclass(slots=True, frozen=True)
class CreateGoalInput:
    user_id: str
    title: str
    domain_id: int
    description: str | None = None
    current_state: str | None = None
    desired_state: str | None = None
    difficulty_level: int = 5
    reality_shift_enabled: bool = False


@dataclass(slots=True, frozen=True)
class CreateGoalOutput:
    goal: Goal
    first_challenge: Challenge | None


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CreateGoalUseCase:
    """Create a goal and schedule an easy template challenge for its first day."""

    def __init__(
        self,
        *,
        goals: GoalRepository,
        templates: ChallengeTemplateRepository,
        challenges: ChallengeRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._goals = goals
        self._templates = templates
        self._challenges = challenges
        self._clock = clock

    def execute(self, data: CreateGoalInput) -> CreateGoalOutput:
        now = self._clock()
        goal = self._goals.add(
            Goal(
                id="",
                user_id=data.user_id,
                domain_id=data.domain_id,
                title=data.title,
                description=data.description,
                current_state=data.current_state,
                desired_state=data.desired_state,
                difficulty_level=data.difficulty_level,
                reality_shift_enabled=data.reality_shift_enabled,
                started_at=now,
            )
        )
        logger.info(f"goals.create: goal_id={goal.id} domain_id={data.domain_id}")

        template = self._templates.first_for_domain(
            data.domain_id,
            max_difficulty=FIRST_CHALLENGE_MAX_DIFFICULTY,
            is_reality_shift=False,
        )
        if template is None:
            logger.info(f"goals.create: no starter template for domain_id={data.domain_id}")
            return CreateGoalOutput(goal=goal, first_challenge=None)

        challenge = self._challenges.add(
            NewChallenge(
                user_id=data.user_id,
                goal_id=goal.id,
                template_id=template.id,
                title=template.title,
                description=template.description,
                difficulty=template.difficulty,
                is_reality_shift=False,
                scheduled_date=now.date(),
                personalization_notes=(
                    f"Day 1 of your {goal.title} journey! Start strong with this "
                    "foundation-building challenge."
                ),
            )
        )
        return CreateGoalOutput(goal=goal, first_challenge=challenge)
