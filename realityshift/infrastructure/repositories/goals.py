# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date, datetime

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session, joinedload

from realityshift.domain.goals.entities import Challenge as DomainChallenge
from realityshift.domain.goals.entities import ChallengeLog as DomainChallengeLog
from realityshift.domain.goals.entities import ChallengeStatus, DifficultyBand, GoalStatus, NewChallenge
from realityshift.domain.goals.entities import ChallengeTemplate as DomainTemplate
from realityshift.domain.goals.entities import Goal as DomainGoal
from realityshift.domain.goals.entities import GoalDomain as DomainGoalDomain
from realityshift.domain.goals.exceptions import ChallengeNotFoundError, GoalNotFoundError
from realityshift.domain.goals.repositories import (
    ChallengeRepository,
    ChallengeTemplateRepository,
    GoalDomainRepository,
    GoalRepository,
)
from realityshift.infrastructure.db.models import (
    Challenge,
    ChallengeLog,
    ChallengeTemplate,
    Goal,
    GoalDomain,
    as_utc,
)
from realityshift.infrastructure.unit_of_work import unit_of_work_scope


def _domain_to_entity(row: GoalDomain) -> DomainGoalDomain:
    return DomainGoalDomain(
        id=row.id,
        name=row.name,
        icon=row.icon,
        color=row.color,
        description=row.description,
        examples=tuple(row.examples or ()),
    )


def _goal_to_entity(row: Goal) -> DomainGoal:
    return DomainGoal(
        id=row.id,
        user_id=row.user_id,
        domain_id=row.domain_id,
        title=row.title,
        description=row.description,
        current_state=row.current_state,
        desired_state=row.desired_state,
        difficulty_level=int(row.difficulty_level or 5),
        reality_shift_enabled=bool(row.reality_shift_enabled),
        status=GoalStatus(row.status),
        started_at=as_utc(row.started_at),
        created_at=as_utc(row.created_at),
        domain=_domain_to_entity(row.domain) if row.domain else None,
    )


def _template_to_entity(row: ChallengeTemplate) -> DomainTemplate:
    return DomainTemplate(
        id=row.id,
        domain_id=row.domain_id,
        title=row.title,
        description=row.description,
        difficulty=int(row.difficulty),
        instructions=row.instructions,
        duration_minutes=row.duration_minutes,
        is_reality_shift=bool(row.is_reality_shift),
        scientific_references=tuple(row.scientific_references or ()),
        tags=tuple(row.tags or ()),
        success_criteria=row.success_criteria,
    )


def _challenge_to_entity(row: Challenge) -> DomainChallenge:
    template = row.template
    return DomainChallenge(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        description=row.description,
        difficulty=int(row.difficulty or 5),
        scheduled_date=row.scheduled_date,
        goal_id=row.goal_id,
        template_id=row.template_id,
        personalization_notes=row.personalization_notes,
        is_reality_shift=bool(row.is_reality_shift),
        status=ChallengeStatus(row.status),
        completed_at=as_utc(row.completed_at),
        skipped_reason=row.skipped_reason,
        created_at=as_utc(row.created_at),
        goal_title=row.goal.title if row.goal else None,
        instructions=template.instructions if template else None,
        success_criteria=template.success_criteria if template else None,
        scientific_references=tuple(template.scientific_references or ()) if template else (),
    )


def _log_to_entity(row: ChallengeLog) -> DomainChallengeLog:
    return DomainChallengeLog(
        id=row.id,
        challenge_id=row.challenge_id,
        user_id=row.user_id,
        completed_at=as_utc(row.completed_at),
        difficulty_felt=row.difficulty_felt,
        satisfaction=row.satisfaction,
        notes=row.notes,
    )


class SqlAlchemyGoalDomainRepository(GoalDomainRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def list_all(self) -> Sequence[DomainGoalDomain]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = session.query(GoalDomain).order_by(GoalDomain.id.asc()).all()
            return [_domain_to_entity(row) for row in rows]

    def get(self, domain_id: int) -> DomainGoalDomain | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(GoalDomain, domain_id)
            return _domain_to_entity(row) if row else None


class SqlAlchemyGoalRepository(GoalRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def list_for_user(self, user_id: str) -> Sequence[DomainGoal]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(Goal)
                .filter(Goal.user_id == user_id)
                .order_by(desc(Goal.created_at))
                .all()
            )
            return [_goal_to_entity(row) for row in rows]

    def get_for_user(self, goal_id: str, user_id: str) -> DomainGoal | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(Goal)
                .filter(Goal.id == goal_id, Goal.user_id == user_id)
                .first()
            )
            return _goal_to_entity(row) if row else None

    def get_active(self, user_id: str) -> DomainGoal | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(Goal)
                .filter(Goal.user_id == user_id, Goal.status == GoalStatus.ACTIVE.value)
                .order_by(desc(Goal.created_at))
                .first()
            )
            return _goal_to_entity(row) if row else None

    def find_active_in_domain(self, user_id: str, domain_id: int) -> DomainGoal | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(Goal)
                .filter(
                    Goal.user_id == user_id,
                    Goal.domain_id == domain_id,
                    Goal.status == GoalStatus.ACTIVE.value,
                )
                .order_by(desc(Goal.created_at))
                .first()
            )
            return _goal_to_entity(row) if row else None

    def add(self, goal: DomainGoal) -> DomainGoal:
        with unit_of_work_scope(self._session_factory) as session:
            row = Goal(
                user_id=goal.user_id,
                domain_id=goal.domain_id,
                title=goal.title,
                description=goal.description,
                current_state=goal.current_state,
                desired_state=goal.desired_state,
                difficulty_level=goal.difficulty_level,
                reality_shift_enabled=goal.reality_shift_enabled,
                status=goal.status.value,
            )
            if goal.started_at is not None:
                row.started_at = goal.started_at
            session.add(row)
            session.flush()
            session.refresh(row)
            return _goal_to_entity(row)

    def set_status(self, goal_id: str, status: GoalStatus) -> DomainGoal:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Goal, goal_id)
            if row is None:
                raise GoalNotFoundError()
            row.status = status.value
            session.flush()
            session.refresh(row)
            return _goal_to_entity(row)


class SqlAlchemyChallengeTemplateRepository(ChallengeTemplateRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, template_id: str) -> DomainTemplate | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(ChallengeTemplate, template_id)
            return _template_to_entity(row) if row else None

    def first_for_domain(
        self,
        domain_id: int,
        *,
        max_difficulty: int | None = None,
        is_reality_shift: bool | None = None,
    ) -> DomainTemplate | None:
        with unit_of_work_scope(self._session_factory) as session:
            query = session.query(ChallengeTemplate).filter(ChallengeTemplate.domain_id == domain_id)
            if max_difficulty is not None:
                query = query.filter(ChallengeTemplate.difficulty <= max_difficulty)
            if is_reality_shift is not None:
                query = query.filter(ChallengeTemplate.is_reality_shift == is_reality_shift)
            row = query.order_by(asc(ChallengeTemplate.difficulty)).first()
            return _template_to_entity(row) if row else None

    def search(self, *, domain_id: int | None, band: DifficultyBand) -> Sequence[DomainTemplate]:
        low, high = band.bounds()
        with unit_of_work_scope(self._session_factory) as session:
            query = session.query(ChallengeTemplate)
            if domain_id is not None:
                query = query.filter(ChallengeTemplate.domain_id == domain_id)
            if low is not None:
                query = query.filter(ChallengeTemplate.difficulty >= low)
            if high is not None:
                query = query.filter(ChallengeTemplate.difficulty <= high)
            rows = query.order_by(
                asc(ChallengeTemplate.difficulty), asc(ChallengeTemplate.title)
            ).all()
            return [_template_to_entity(row) for row in rows]


class SqlAlchemyChallengeRepository(ChallengeRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def add(self, challenge: NewChallenge) -> DomainChallenge:
        with unit_of_work_scope(self._session_factory) as session:
            row = Challenge(
                user_id=challenge.user_id,
                goal_id=challenge.goal_id,
                template_id=challenge.template_id,
                title=challenge.title,
                description=challenge.description,
                personalization_notes=challenge.personalization_notes,
                difficulty=challenge.difficulty,
                is_reality_shift=challenge.is_reality_shift,
                scheduled_date=challenge.scheduled_date,
                status=ChallengeStatus.PENDING.value,
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return _challenge_to_entity(row)

    def get_for_user(self, challenge_id: str, user_id: str) -> DomainChallenge | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(Challenge)
                .options(joinedload(Challenge.goal))
                .filter(Challenge.id == challenge_id, Challenge.user_id == user_id)
                .first()
            )
            return _challenge_to_entity(row) if row else None

    def list_for_user(self, user_id: str, *, limit: int = 30) -> Sequence[DomainChallenge]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(Challenge)
                .options(joinedload(Challenge.goal))
                .filter(Challenge.user_id == user_id)
                .order_by(desc(Challenge.scheduled_date))
                .limit(limit)
                .all()
            )
            return [_challenge_to_entity(row) for row in rows]

    def scheduled_on(self, user_id: str, day: date) -> Sequence[DomainChallenge]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(Challenge)
                .options(joinedload(Challenge.goal))
                .filter(Challenge.user_id == user_id, Challenge.scheduled_date == day)
                .order_by(asc(Challenge.status), desc(Challenge.created_at))
                .all()
            )
            return [_challenge_to_entity(row) for row in rows]

    def recent_completed(self, user_id: str, *, limit: int = 30) -> Sequence[DomainChallenge]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(Challenge)
                .options(joinedload(Challenge.goal))
                .filter(
                    Challenge.user_id == user_id,
                    Challenge.status == ChallengeStatus.COMPLETED.value,
                )
                .order_by(desc(Challenge.completed_at))
                .limit(limit)
                .all()
            )
            return [_challenge_to_entity(row) for row in rows]

    def settle(
        self,
        challenge_id: str,
        status: ChallengeStatus,
        *,
        at: datetime,
        reason: str | None = None,
    ) -> DomainChallenge:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Challenge, challenge_id)
            if row is None:
                raise ChallengeNotFoundError()
            row.status = status.value
            if status is ChallengeStatus.COMPLETED:
                row.completed_at = at
            elif status is ChallengeStatus.SKIPPED:
                row.skipped_reason = reason
            session.flush()
            session.refresh(row)
            return _challenge_to_entity(row)

    def add_log(self, log: DomainChallengeLog) -> DomainChallengeLog:
        with unit_of_work_scope(self._session_factory) as session:
            row = ChallengeLog(
                challenge_id=log.challenge_id,
                user_id=log.user_id,
                completed_at=log.completed_at,
                difficulty_felt=log.difficulty_felt,
                satisfaction=log.satisfaction,
                notes=log.notes,
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return _log_to_entity(row)


__all__ = [
    "SqlAlchemyChallengeRepository",
    "SqlAlchemyChallengeTemplateRepository",
    "SqlAlchemyGoalDomainRepository",
    "SqlAlchemyGoalRepository",
]
