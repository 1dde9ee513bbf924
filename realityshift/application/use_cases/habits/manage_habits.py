# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Any

from realityshift.domain.goals.entities import calculate_streak
from realityshift.domain.habits.entities import Habit
from realityshift.domain.habits.exceptions import HabitNotFoundError
from realityshift.domain.habits.repositories import HabitLogRepository, HabitRepository
from realityshift.shared.errors import ValidationError
from realityshift.shared.logging import logger

HABIT_STREAK_WINDOW_DAYS = 60


@dataclass(slots=True, frozen=True)
class HabitStatus:
    habit: Habit
    completed_today: bool
    today_notes: str | None
    streak: int


def _utcnow() -> datetime:
    return datetime.now(UTC)


def habit_streak(logs: HabitLogRepository, habit_id: str, today: date) -> int:
    since = today - timedelta(days=HABIT_STREAK_WINDOW_DAYS)
    done = {log.log_date for log in logs.for_habit_since(habit_id, since) if log.completed}
    return calculate_streak(done, today, window=HABIT_STREAK_WINDOW_DAYS)


class ListHabitsUseCase:
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

    def execute(self, user_id: str, *, include_inactive: bool = False) -> list[HabitStatus]:
        today = self._clock().date()
        habits = self._habits.list_for_user(user_id, include_inactive=include_inactive)
        by_habit = {log.habit_id: log for log in self._logs.for_day(user_id, today)}

        result = []
        for habit in habits:
            log = by_habit.get(habit.id)
            result.append(
                HabitStatus(
                    habit=habit,
                    completed_today=bool(log and log.completed),
                    today_notes=log.notes if log else None,
                    streak=habit_streak(self._logs, habit.id, today),
                )
            )
        return result


class CreateHabitUseCase:
    def __init__(self, *, habits: HabitRepository) -> None:
        self._habits = habits

    def execute(
        self,
        user_id: str,
        name: str | None,
        *,
        description: str | None = None,
        icon: str | None = None,
        frequency: str | None = None,
        target_days: Sequence[int] | None = None,
        goal_id: str | None = None,
    ) -> Habit:
        if not name or not name.strip():
            raise ValidationError("Name is required")

        habit = self._habits.add(
            Habit(
                id="",
                user_id=user_id,
                name=name.strip(),
                goal_id=goal_id,
                description=description,
                icon=icon or "✅",
                frequency=frequency or "daily",
                target_days=tuple(target_days or ()),
            )
        )
        logger.info(f"habits.create: habit_id={habit.id}")
        return habit


class UpdateHabitUseCase:
    """Apply a partial update; only keys present in ``changes`` are written."""

    def __init__(self, *, habits: HabitRepository) -> None:
        self._habits = habits

    def execute(self, user_id: str, habit_id: str | None, changes: Mapping[str, Any]) -> Habit:
        if not habit_id:
            raise ValidationError("Habit ID is required")
        if self._habits.get_for_user(habit_id, user_id) is None:
            raise HabitNotFoundError()
        return self._habits.update(habit_id, changes)


class DeleteHabitUseCase:
    def __init__(self, *, habits: HabitRepository) -> None:
        self._habits = habits

    def execute(self, user_id: str, habit_id: str | None) -> None:
        if not habit_id:
            raise ValidationError("Habit ID is required")
        if self._habits.get_for_user(habit_id, user_id) is None:
            raise HabitNotFoundError()
        self._habits.delete(habit_id)
        logger.info(f"habits.delete: habit_id={habit_id}")
