# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence

from realityshift.domain.goals.entities import Goal, GoalDomain
from realityshift.domain.goals.repositories import GoalDomainRepository, GoalRepository


class ListGoalsUseCase:
    def __init__(self, *, goals: GoalRepository) -> None:
        self._goals = goals

    def execute(self, user_id: str) -> Sequence[Goal]:
        return self._goals.list_for_user(user_id)


class ListDomainsUseCase:
    def __init__(self, *, domains: GoalDomainRepository) -> None:
        self._domains = domains

    def execute(self) -> Sequence[GoalDomain]:
        return self._domains.list_all()
