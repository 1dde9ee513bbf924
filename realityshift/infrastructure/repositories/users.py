# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from realityshift.domain.users.entities import User as DomainUser
from realityshift.domain.users.entities import UserPreferences as DomainPreferences
from realityshift.domain.users.exceptions import UserAlreadyExistsError
from realityshift.domain.users.repositories import PreferencesRepository, UserRepository
from realityshift.infrastructure.db.models import User, UserPreferences, as_utc
from realityshift.infrastructure.unit_of_work import unit_of_work_scope
from realityshift.shared.logging import logger

_PREFERENCE_FIELDS = (
    "display_name",
    "preferred_difficulty",
    "challenges_per_day",
    "reality_shift_enabled",
    "preferred_challenge_time",
    "focus_areas",
    "avoid_areas",
    "ai_personality",
    "include_scientific_basis",
    "challenge_length_preference",
    "notifications_enabled",
    "daily_reminder_time",
    "streak_reminders",
    "theme",
)


def _user_to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        display_name=row.display_name,
        created_at=as_utc(row.created_at),
        onboarding_completed=bool(row.onboarding_completed),
        onboarding_data=row.onboarding_data,
    )


def _preferences_to_domain(row: UserPreferences) -> DomainPreferences:
    return DomainPreferences(
        user_id=row.user_id,
        display_name=row.display_name,
        preferred_difficulty=int(row.preferred_difficulty or 5),
        challenges_per_day=int(row.challenges_per_day or 1),
        reality_shift_enabled=bool(row.reality_shift_enabled),
        preferred_challenge_time=row.preferred_challenge_time,
        focus_areas=tuple(row.focus_areas or ()),
        avoid_areas=tuple(row.avoid_areas or ()),
        ai_personality=row.ai_personality or "empathetic",
        include_scientific_basis=bool(row.include_scientific_basis),
        challenge_length_preference=row.challenge_length_preference or "medium",
        notifications_enabled=bool(row.notifications_enabled),
        daily_reminder_time=row.daily_reminder_time,
        streak_reminders=bool(row.streak_reminders),
        theme=row.theme or "system",
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def find_by_email(self, email: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.query(User).filter(User.email == email).first()
            return _user_to_domain(row) if row else None

    def find_by_id(self, user_id: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            return _user_to_domain(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = User(
                    email=user.email,
                    password_hash=user.password_hash,
                    display_name=user.display_name,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                # Every account starts with a default preferences row
                session.add(UserPreferences(user_id=row.id, display_name=user.display_name))
                session.flush()
                session.refresh(row)
                return _user_to_domain(row)
        except IntegrityError as exc:
            # A concurrent registration won the unique email index
            logger.warning(f"users: integrity error on insert, email taken ({type(exc.orig).__name__})")
            raise UserAlreadyExistsError() from exc

    def complete_onboarding(self, user_id: str, data: Mapping[str, Any]) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            if row is None:
                return
            row.onboarding_completed = True
            row.onboarding_data = dict(data)


class SqlAlchemyPreferencesRepository(PreferencesRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get_or_create(self, user_id: str) -> DomainPreferences:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(UserPreferences, user_id)
            if row is None:
                row = UserPreferences(user_id=user_id)
                session.add(row)
                session.flush()
                session.refresh(row)
            return _preferences_to_domain(row)

    def save(self, user_id: str, changes: Mapping[str, Any]) -> DomainPreferences:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(UserPreferences, user_id)
            if row is None:
                row = UserPreferences(user_id=user_id)
                session.add(row)
            for name in _PREFERENCE_FIELDS:
                if name not in changes:
                    continue
                value = changes[name]
                if name in ("focus_areas", "avoid_areas"):
                    value = list(value or [])
                setattr(row, name, value)
            session.flush()
            session.refresh(row)
            return _preferences_to_domain(row)


__all__ = ["SqlAlchemyPreferencesRepository", "SqlAlchemyUserRepository"]
