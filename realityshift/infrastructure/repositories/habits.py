# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from datetime import date
from typing import Any

from sqlalchemy import desc
from sqlalchemy.orm import Session

from realityshift.domain.habits.entities import Habit as DomainHabit
from realityshift.domain.habits.entities import HabitLog as DomainHabitLog
from realityshift.domain.habits.entities import LogSource
from realityshift.domain.habits.exceptions import HabitNotFoundError
from realityshift.domain.habits.repositories import HabitLogRepository, HabitRepository
from realityshift.infrastructure.db.models import Habit, HabitLog, as_utc
from realityshift.infrastructure.unit_of_work import unit_of_work_scope

_MUTABLE_FIELDS = ("name", "description", "icon", "frequency", "target_days", "goal_id", "is_active")


def _habit_to_entity(row: Habit) -> DomainHabit:
    return DomainHabit(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        goal_id=row.goal_id,
        description=row.description,
        icon=row.icon or "✅",
        frequency=row.frequency or "daily",
        target_days=tuple(row.target_days or ()),
        is_active=bool(row.is_active),
        created_at=as_utc(row.created_at),
    )


def _log_to_entity(row: HabitLog) -> DomainHabitLog:
    return DomainHabitLog(
        id=row.id,
        habit_id=row.habit_id,
        log_date=row.log_date,
        completed=bool(row.completed),
        notes=row.notes,
        source=LogSource(row.source or LogSource.MANUAL.value),
    )


class SqlAlchemyHabitRepository(HabitRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def list_for_user(self, user_id: str, *, include_inactive: bool = False) -> Sequence[DomainHabit]:
        with unit_of_work_scope(self._session_factory) as session:
            query = session.query(Habit).filter(Habit.user_id == user_id)
            if not include_inactive:
                query = query.filter(Habit.is_active.is_(True))
            rows = query.order_by(desc(Habit.created_at)).all()
            return [_habit_to_entity(row) for row in rows]

    def get_for_user(self, habit_id: str, user_id: str) -> DomainHabit | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(Habit)
                .filter(Habit.id == habit_id, Habit.user_id == user_id)
                .first()
            )
            return _habit_to_entity(row) if row else None

    def add(self, habit: DomainHabit) -> DomainHabit:
        with unit_of_work_scope(self._session_factory) as session:
            row = Habit(
                user_id=habit.user_id,
                goal_id=habit.goal_id,
                name=habit.name,
                description=habit.description,
                icon=habit.icon,
                frequency=habit.frequency,
                target_days=list(habit.target_days),
                is_active=habit.is_active,
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return _habit_to_entity(row)

    def update(self, habit_id: str, changes: Mapping[str, Any]) -> DomainHabit:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Habit, habit_id)
            if row is None:
                raise HabitNotFoundError()
            for name in _MUTABLE_FIELDS:
                if name in changes:
                    value = changes[name]
                    setattr(row, name, list(value or []) if name == "target_days" else value)
            session.flush()
            session.refresh(row)
            return _habit_to_entity(row)

    def delete(self, habit_id: str) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Habit, habit_id)
            if row is not None:
                session.delete(row)


class SqlAlchemyHabitLogRepository(HabitLogRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def upsert(
        self,
        habit_id: str,
        log_date: date,
        *,
        completed: bool,
        notes: str | None,
        source: LogSource,
    ) -> DomainHabitLog:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(HabitLog)
                .filter(HabitLog.habit_id == habit_id, HabitLog.log_date == log_date)
                .first()
            )
            if row is None:
                row = HabitLog(habit_id=habit_id, log_date=log_date)
                session.add(row)
            row.completed = completed
            row.notes = notes
            row.source = source.value
            session.flush()
            session.refresh(row)
            return _log_to_entity(row)

    def for_day(self, user_id: str, day: date) -> Sequence[DomainHabitLog]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(HabitLog)
                .join(Habit, Habit.id == HabitLog.habit_id)
                .filter(Habit.user_id == user_id, HabitLog.log_date == day)
                .all()
            )
            return [_log_to_entity(row) for row in rows]

    def for_habit_since(self, habit_id: str, since: date) -> Sequence[DomainHabitLog]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(HabitLog)
                .filter(HabitLog.habit_id == habit_id, HabitLog.log_date >= since)
                .order_by(desc(HabitLog.log_date))
                .all()
            )
            return [_log_to_entity(row) for row in rows]


__all__ = ["SqlAlchemyHabitLogRepository", "SqlAlchemyHabitRepository"]
