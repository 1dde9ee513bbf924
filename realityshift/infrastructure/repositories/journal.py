# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date

from sqlalchemy import desc
from sqlalchemy.orm import Session

from realityshift.domain.journal.entities import DailySurvey as DomainSurvey
from realityshift.domain.journal.entities import DiaryEntry as DomainDiaryEntry
from realityshift.domain.journal.repositories import DiaryRepository, SurveyRepository
from realityshift.infrastructure.db.models import DailySurvey, DiaryEntry, as_utc
from realityshift.infrastructure.unit_of_work import unit_of_work_scope

_SURVEY_FIELDS = (
    "energy_level",
    "motivation_level",
    "overall_mood",
    "sleep_quality",
    "stress_level",
    "biggest_win",
    "biggest_blocker",
    "gratitude_note",
    "tomorrow_intention",
    "completion_level",
)


def _entry_to_entity(row: DiaryEntry) -> DomainDiaryEntry:
    return DomainDiaryEntry(
        id=row.id,
        user_id=row.user_id,
        entry_type=row.entry_type,
        transcript=row.transcript,
        audio_url=row.audio_url,
        audio_duration_seconds=row.audio_duration_seconds,
        mood_score=row.mood_score,
        ai_summary=row.ai_summary,
        goal_id=row.goal_id,
        challenge_id=row.challenge_id,
        created_at=as_utc(row.created_at),
    )


def _survey_to_entity(row: DailySurvey) -> DomainSurvey:
    return DomainSurvey(
        id=row.id,
        user_id=row.user_id,
        survey_date=row.survey_date,
        energy_level=row.energy_level,
        motivation_level=row.motivation_level,
        overall_mood=row.overall_mood,
        sleep_quality=row.sleep_quality,
        stress_level=row.stress_level,
        biggest_win=row.biggest_win,
        biggest_blocker=row.biggest_blocker,
        gratitude_note=row.gratitude_note,
        tomorrow_intention=row.tomorrow_intention,
        completion_level=row.completion_level or "minimum",
    )


class SqlAlchemyDiaryRepository(DiaryRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def add(self, entry: DomainDiaryEntry) -> DomainDiaryEntry:
        with unit_of_work_scope(self._session_factory) as session:
            row = DiaryEntry(
                user_id=entry.user_id,
                goal_id=entry.goal_id,
                challenge_id=entry.challenge_id,
                entry_type=entry.entry_type,
                audio_url=entry.audio_url,
                audio_duration_seconds=entry.audio_duration_seconds,
                transcript=entry.transcript,
                mood_score=entry.mood_score,
                ai_summary=entry.ai_summary,
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return _entry_to_entity(row)

    def list_for_user(self, user_id: str, *, limit: int = 20) -> Sequence[DomainDiaryEntry]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(DiaryEntry)
                .filter(DiaryEntry.user_id == user_id)
                .order_by(desc(DiaryEntry.created_at))
                .limit(limit)
                .all()
            )
            return [_entry_to_entity(row) for row in rows]


class SqlAlchemySurveyRepository(SurveyRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def upsert(self, survey: DomainSurvey) -> DomainSurvey:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(DailySurvey)
                .filter(
                    DailySurvey.user_id == survey.user_id,
                    DailySurvey.survey_date == survey.survey_date,
                )
                .first()
            )
            if row is None:
                row = DailySurvey(user_id=survey.user_id, survey_date=survey.survey_date)
                session.add(row)
            for name in _SURVEY_FIELDS:
                setattr(row, name, getattr(survey, name))
            session.flush()
            session.refresh(row)
            return _survey_to_entity(row)

    def since(self, user_id: str, start: date) -> Sequence[DomainSurvey]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(DailySurvey)
                .filter(DailySurvey.user_id == user_id, DailySurvey.survey_date >= start)
                .order_by(desc(DailySurvey.survey_date))
                .all()
            )
            return [_survey_to_entity(row) for row in rows]


__all__ = ["SqlAlchemyDiaryRepository", "SqlAlchemySurveyRepository"]
