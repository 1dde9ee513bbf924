# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import Enum


class LogSource(str, Enum):
    MANUAL = "manual"
    VOICE = "voice"


def utc_day(moment: datetime | date) -> date:
    """Normalize a timestamp to the UTC calendar day it falls on."""

    if isinstance(moment, datetime):
        if moment.tzinfo is None:
            return moment.date()
        return moment.astimezone(UTC).date()
    return moment


@dataclass(slots=True, frozen=True)
class Habit:

    id: str
    user_id: str
    name: str
    goal_id: str | None = None
    description: str | None = None
    icon: str = "✅"
    frequency: str = "daily"
    target_days: tuple[int, ...] = ()
    is_active: bool = True
    created_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class HabitLog:

    id: str
    habit_id: str
    log_date: date
    completed: bool
    notes: str | None = None
    source: LogSource = LogSource.MANUAL


@dataclass(slots=True, frozen=True)
class InterpretedHabitLog:
    """A habit outcome read out of free-form speech."""

    habit_id: str
    habit_name: str
    completed: bool
    notes: str | None = None


@dataclass(slots=True, frozen=True)
class Interpretation:

    logs: tuple[InterpretedHabitLog, ...]
    fallback_mode: bool = False
    message: str | None = None
    raw_response: str | None = None
    parse_error: str | None = None
