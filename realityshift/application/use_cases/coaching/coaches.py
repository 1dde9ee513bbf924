# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence

from realityshift.domain.coaching.entities import CustomCoach
from realityshift.domain.coaching.exceptions import CoachNotFoundError
from realityshift.domain.coaching.repositories import CoachRepository
from realityshift.shared.errors import ValidationError
from realityshift.shared.logging import logger


class ListCoachesUseCase:
    def __init__(self, *, coaches: CoachRepository) -> None:
        self._coaches = coaches

    def execute(self, user_id: str) -> Sequence[CustomCoach]:
        return self._coaches.list_for_user(user_id)


class CreateCoachUseCase:
    def __init__(self, *, coaches: CoachRepository) -> None:
        self._coaches = coaches

    def execute(
        self,
        user_id: str,
        name: str | None,
        system_prompt: str | None,
        *,
        icon: str | None = None,
        color: str | None = None,
        is_goal_coach: bool = False,
        goal_id: str | None = None,
    ) -> CustomCoach:
        if not name or not system_prompt:
            raise ValidationError("Name and instructions are required")

        coach = self._coaches.add(
            CustomCoach(
                id="",
                user_id=user_id,
                name=name,
                system_prompt=system_prompt,
                icon=icon or "🤖",
                color=color or "#8b5cf6",
                is_goal_coach=is_goal_coach,
                goal_id=goal_id,
            )
        )
        logger.info(f"coaches.create: coach_id={coach.id}")
        return coach


class DeleteCoachUseCase:
    def __init__(self, *, coaches: CoachRepository) -> None:
        self._coaches = coaches

    def execute(self, user_id: str, coach_id: str | None) -> None:
        if not coach_id:
            raise ValidationError("Coach ID is required")
        if not self._coaches.delete_for_user(coach_id, user_id):
            raise CoachNotFoundError()
        logger.info(f"coaches.delete: coach_id={coach_id}")
