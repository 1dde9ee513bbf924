# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Goals, their domains and the daily challenges that move them forward."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"
    PAUSED = "paused"


class ChallengeStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class DifficultyBand(str, Enum):
    ALL = "all"
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    def bounds(self) -> tuple[int | None, int | None]:
        if self is DifficultyBand.EASY:
            return None, 3
        if self is DifficultyBand.MEDIUM:
            return 4, 6
        if self is DifficultyBand.HARD:
            return 7, None
        return None, None


@dataclass(slots=True, frozen=True)
class GoalDomain:

    id: int
    name: str
    icon: str | None = None
    color: str | None = None
    description: str | None = None
    examples: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class Goal:

    id: str
    user_id: str
    domain_id: int | None
    title: str
    description: str | None = None
    current_state: str | None = None
    desired_state: str | None = None
    difficulty_level: int = 5
    reality_shift_enabled: bool = False
    status: GoalStatus = GoalStatus.ACTIVE
    started_at: datetime | None = None
    created_at: datetime | None = None
    domain: GoalDomain | None = None

    def day_in_journey(self, now: datetime) -> int:
        """Count of started days since the goal began, never below one."""

        start = self.started_at or self.created_at
        if start is None:
            return 1
        elapsed = (now - start).total_seconds() / 86400
        return max(1, math.ceil(elapsed))


@dataclass(slots=True, frozen=True)
class ChallengeTemplate:

    id: str
    domain_id: int
    title: str
    description: str
    difficulty: int
    instructions: str | None = None
    duration_minutes: int | None = None
    is_reality_shift: bool = False
    scientific_references: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    success_criteria: str | None = None


@dataclass(slots=True, frozen=True)
class Challenge:

    id: str
    user_id: str
    title: str
    description: str
    difficulty: int
    scheduled_date: date
    goal_id: str | None = None
    template_id: str | None = None
    personalization_notes: str | None = None
    is_reality_shift: bool = False
    status: ChallengeStatus = ChallengeStatus.PENDING
    completed_at: datetime | None = None
    skipped_reason: str | None = None
    created_at: datetime | None = None
    goal_title: str | None = None
    instructions: str | None = None
    success_criteria: str | None = None
    scientific_references: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_settled(self) -> bool:
        return self.status is not ChallengeStatus.PENDING


@dataclass(slots=True, frozen=True)
class ChallengeLog:

    id: str
    challenge_id: str
    user_id: str
    completed_at: datetime
    difficulty_felt: int | None = None
    satisfaction: int | None = None
    notes: str | None = None


@dataclass(slots=True, frozen=True)
class NewChallenge:
    """Fields needed to schedule a challenge; ids and timestamps are assigned on save."""

    user_id: str
    title: str
    description: str
    difficulty: int
    scheduled_date: date
    goal_id: str | None = None
    template_id: str | None = None
    personalization_notes: str | None = None
    is_reality_shift: bool = False


def calculate_streak(completion_days: set[date], today: date, *, window: int = 30) -> int:
    """Consecutive days with a completion counted back from ``today``.

    Today may still be open: a missing entry for today does not break the
    streak, it just starts the count from yesterday.
    """

    streak = 0
    check = today
    for index in range(window):
        if check in completion_days:
            streak += 1
        elif index > 0:
            break
        check = date.fromordinal(check.toordinal() - 1)
    return streak
