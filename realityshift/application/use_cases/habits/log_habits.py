# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime

from realityshift.domain.habits.entities import Habit, HabitLog, LogSource
from realityshift.domain.habits.exceptions import HabitNotFoundError
from realityshift.domain.habits.repositories import HabitLogRepository, HabitRepository


@dataclass(slots=True, frozen=True)
class HabitDayEntry:
    habit: Habit
    log: HabitLog | None


@dataclass(slots=True, frozen=True)
class LogRequest:
    habit_id: str
    completed: bool = False
    notes: str | None = None
    source: LogSource = LogSource.MANUAL


@dataclass(slots=True, frozen=True)
class LogOutcome:
    habit_id: str
    log: HabitLog | None = None
    error: str | None = None


def _utcnow() -> datetime:
    return datetime.now(UTC)


class GetHabitDayUseCase:
    def __init__(
        self,
        *,
        habits: HabitRepository,
        logs: HabitLogRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._habits = habits
        self._logs = logs
        self._clock = clock

    def execute(self, user_id: str, day: date | None = None) -> tuple[date, list[HabitDayEntry]]:
        day = day or self._clock().date()
        by_habit = {log.habit_id: log for log in self._logs.for_day(user_id, day)}
        entries = [
            HabitDayEntry(habit=habit, log=by_habit.get(habit.id))
            for habit in self._habits.list_for_user(user_id)
        ]
        return day, entries


class LogHabitsUseCase:
    """Upsert habit outcomes for one day. Re-logging the same day overwrites."""

    def __init__(
        self,
        *,
        habits: HabitRepository,
        logs: HabitLogRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._habits = habits
        self._logs = logs
        self._clock = clock

    def log_one(self, user_id: str, request: LogRequest, day: date | None = None) -> HabitLog:
        if self._habits.get_for_user(request.habit_id, user_id) is None:
            raise HabitNotFoundError()
        return self._logs.upsert(
            request.habit_id,
            day or self._clock().date(),
            completed=request.completed,
            notes=request.notes,
            source=request.source,
        )

    def log_many(
        self, user_id: str, requests: Sequence[LogRequest], day: date | None = None
    ) -> list[LogOutcome]:
        day = day or self._clock().date()
        outcomes = []
        for request in requests:
            try:
                log = self.log_one(user_id, request, day)
            except HabitNotFoundError as exc:
                outcomes.append(LogOutcome(habit_id=request.habit_id, error=exc.message))
                continue
            outcomes.append(LogOutcome(habit_id=request.habit_id, log=log))
        return outcomes
