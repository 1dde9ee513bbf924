# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from typing import Protocol

from .entities import (
    Challenge,
    ChallengeLog,
    ChallengeStatus,
    ChallengeTemplate,
    DifficultyBand,
    Goal,
    GoalDomain,
    GoalStatus,
    NewChallenge,
)


class GoalDomainRepository(Protocol):
    def list_all(self) -> Sequence[GoalDomain]: ...
    def get(self, domain_id: int) -> GoalDomain | None: ...


class GoalRepository(Protocol):
    def list_for_user(self, user_id: str) -> Sequence[Goal]: ...
    def get_for_user(self, goal_id: str, user_id: str) -> Goal | None: ...
    def get_active(self, user_id: str) -> Goal | None: ...
    def find_active_in_domain(self, user_id: str, domain_id: int) -> Goal | None: ...
    def add(self, goal: Goal) -> Goal: ...
    def set_status(self, goal_id: str, status: GoalStatus) -> Goal: ...


class ChallengeTemplateRepository(Protocol):
    def get(self, template_id: str) -> ChallengeTemplate | None: ...
    def first_for_domain(
        self,
        domain_id: int,
        *,
        max_difficulty: int | None = None,
        is_reality_shift: bool | None = None,
    ) -> ChallengeTemplate | None: ...
    def search(self, *, domain_id: int | None, band: DifficultyBand) -> Sequence[ChallengeTemplate]: ...


class ChallengeRepository(Protocol):
    def add(self, challenge: NewChallenge) -> Challenge: ...
    def get_for_user(self, challenge_id: str, user_id: str) -> Challenge | None: ...
    def list_for_user(self, user_id: str, *, limit: int = 30) -> Sequence[Challenge]: ...
    def scheduled_on(self, user_id: str, day: date) -> Sequence[Challenge]: ...
    def recent_completed(self, user_id: str, *, limit: int = 30) -> Sequence[Challenge]: ...
    def settle(
        self,
        challenge_id: str,
        status: ChallengeStatus,
        *,
        at: datetime,
        reason: str | None = None,
    ) -> Challenge: ...
    def add_log(self, log: ChallengeLog) -> ChallengeLog: ...
