# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import date

from pydantic import Field

from realityshift.domain.habits.entities import LogSource

from .base import CamelModel


class CreateHabitDTO(CamelModel):
    name: str | None = None
    description: str | None = None
    icon: str | None = None
    frequency: str | None = None
    target_days: list[int] | None = None
    goal_id: str | None = None


class UpdateHabitDTO(CamelModel):
    id: str | None = None
    name: str | None = None
    description: str | None = None
    icon: str | None = None
    frequency: str | None = None
    target_days: list[int] | None = None
    goal_id: str | None = None
    is_active: bool | None = None

    def changes(self) -> dict[str, object]:
        # Only fields the client actually sent are written
        changes = self.model_dump(exclude_unset=True, exclude={"id"})
        if not changes.get("name", True):
            changes.pop("name")
        return changes


class HabitLogEntryDTO(CamelModel):
    habit_id: str
    completed: bool = False
    notes: str | None = None
    source: LogSource = LogSource.MANUAL


class HabitLogDTO(CamelModel):
    logs: list[HabitLogEntryDTO] | None = None
    habit_id: str | None = None
    completed: bool = False
    notes: str | None = None
    source: LogSource = LogSource.MANUAL
    log_date: date | None = Field(None, alias="date")


class InterpretDTO(CamelModel):
    transcript: str | None = None
