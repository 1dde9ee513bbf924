# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime

from realityshift.domain.goals.entities import Challenge, NewChallenge
from realityshift.domain.goals.exceptions import TemplateNotFoundError
from realityshift.domain.goals.repositories import (
    ChallengeRepository,
    ChallengeTemplateRepository,
    GoalRepository,
)

DEFAULT_ACCEPT_NOTE = "You chose this challenge - now make it happen!"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AcceptTemplateUseCase:
    def __init__(
        self,
        *,
        templates: ChallengeTemplateRepository,
        goals: GoalRepository,
        challenges: ChallengeRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._templates = templates
        self._goals = goals
        self._challenges = challenges
        self._clock = clock

    def execute(self, user_id: str, template_id: str, scheduled_date: date | None = None) -> Challenge:
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotFoundError()

        # Attach to the active goal of the same domain when there is one
        goal = self._goals.find_active_in_domain(user_id, template.domain_id)
        return self._challenges.add(
            NewChallenge(
                user_id=user_id,
                goal_id=goal.id if goal else None,
                template_id=template.id,
                title=template.title,
                description=template.description,
                difficulty=template.difficulty,
                is_reality_shift=template.is_reality_shift,
                scheduled_date=scheduled_date or self._clock().date(),
                personalization_notes=template.success_criteria or DEFAULT_ACCEPT_NOTE,
            )
        )
