# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any, Protocol

from .entities import Habit, HabitLog, LogSource


class HabitRepository(Protocol):
    def list_for_user(self, user_id: str, *, include_inactive: bool = False) -> Sequence[Habit]: ...
    def get_for_user(self, habit_id: str, user_id: str) -> Habit | None: ...
    def add(self, habit: Habit) -> Habit: ...
    def update(self, habit_id: str, changes: Mapping[str, Any]) -> Habit: ...
    def delete(self, habit_id: str) -> None: ...


class HabitLogRepository(Protocol):
    def upsert(
        self,
        habit_id: str,
        log_date: date,
        *,
        completed: bool,
        notes: str | None,
        source: LogSource,
    ) -> HabitLog: ...
    def for_day(self, user_id: str, day: date) -> Sequence[HabitLog]: ...
    def for_habit_since(self, habit_id: str, since: date) -> Sequence[HabitLog]: ...
