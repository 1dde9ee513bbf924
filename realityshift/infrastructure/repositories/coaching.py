# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import desc
from sqlalchemy.orm import Session

from realityshift.domain.coaching.entities import EXPERT_CHAT, GENERAL_COACH, ChatMessage
from realityshift.domain.coaching.entities import Conversation as DomainConversation
from realityshift.domain.coaching.entities import CustomCoach as DomainCoach
from realityshift.domain.coaching.repositories import CoachRepository, ConversationRepository
from realityshift.infrastructure.db.models import Conversation, CustomCoach, as_utc, utcnow
from realityshift.infrastructure.unit_of_work import unit_of_work_scope

_RECENT_CONVERSATIONS = 20


def _coach_to_entity(row: CustomCoach) -> DomainCoach:
    return DomainCoach(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        system_prompt=row.system_prompt,
        icon=row.icon,
        color=row.color,
        is_goal_coach=bool(row.is_goal_coach),
        goal_id=row.goal_id,
        created_at=as_utc(row.created_at),
    )


def _message_from_json(raw: Mapping[str, Any], fallback: datetime) -> ChatMessage:
    stamp = raw.get("timestamp")
    try:
        timestamp = datetime.fromisoformat(stamp) if stamp else fallback
    except (TypeError, ValueError):
        timestamp = fallback
    return ChatMessage(role=str(raw.get("role", "user")), content=str(raw.get("content", "")), timestamp=timestamp)


def _conversation_to_entity(row: Conversation) -> DomainConversation:
    updated_at = as_utc(row.updated_at) or utcnow()
    return DomainConversation(
        id=row.id,
        user_id=row.user_id,
        conversation_type=row.conversation_type,
        title=row.title,
        goal_id=row.goal_id,
        messages=tuple(_message_from_json(item, updated_at) for item in (row.messages or [])),
        context=dict(row.context or {}),
        updated_at=updated_at,
    )


def _matches_coach(context: Mapping[str, Any] | None, coach_id: str) -> bool:
    stored = (context or {}).get("coachId")
    if coach_id == GENERAL_COACH:
        return not stored or stored == GENERAL_COACH
    return stored == coach_id


class SqlAlchemyCoachRepository(CoachRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def add(self, coach: DomainCoach) -> DomainCoach:
        with unit_of_work_scope(self._session_factory) as session:
            row = CustomCoach(
                user_id=coach.user_id,
                name=coach.name,
                icon=coach.icon,
                color=coach.color,
                system_prompt=coach.system_prompt,
                is_goal_coach=coach.is_goal_coach,
                goal_id=coach.goal_id,
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return _coach_to_entity(row)

    def list_for_user(self, user_id: str) -> Sequence[DomainCoach]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(CustomCoach)
                .filter(CustomCoach.user_id == user_id)
                .order_by(desc(CustomCoach.created_at))
                .all()
            )
            return [_coach_to_entity(row) for row in rows]

    def get_for_user(self, coach_id: str, user_id: str) -> DomainCoach | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(CustomCoach)
                .filter(CustomCoach.id == coach_id, CustomCoach.user_id == user_id)
                .first()
            )
            return _coach_to_entity(row) if row else None

    def delete_for_user(self, coach_id: str, user_id: str) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(CustomCoach)
                .filter(CustomCoach.id == coach_id, CustomCoach.user_id == user_id)
                .first()
            )
            if row is None:
                return False
            session.delete(row)
            return True


class SqlAlchemyConversationRepository(ConversationRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def find_for_coach(self, user_id: str, coach_id: str) -> DomainConversation | None:
        with unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(Conversation)
                .filter(
                    Conversation.user_id == user_id,
                    Conversation.conversation_type == EXPERT_CHAT,
                )
                .order_by(desc(Conversation.updated_at))
                .limit(_RECENT_CONVERSATIONS)
                .all()
            )
            for row in rows:
                if _matches_coach(row.context, coach_id):
                    return _conversation_to_entity(row)
            return None

    def create(
        self,
        user_id: str,
        conversation_type: str,
        *,
        title: str | None,
        context: Mapping[str, Any],
    ) -> DomainConversation:
        with unit_of_work_scope(self._session_factory) as session:
            row = Conversation(
                user_id=user_id,
                conversation_type=conversation_type,
                title=title,
                messages=[],
                context=dict(context),
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return _conversation_to_entity(row)

    def replace_messages(
        self, conversation_id: str, messages: Sequence[ChatMessage]
    ) -> DomainConversation:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Conversation, conversation_id)
            if row is None:
                raise LookupError(f"conversation {conversation_id} not found")
            row.messages = [message.to_dict() for message in messages]
            row.updated_at = utcnow()
            session.flush()
            session.refresh(row)
            return _conversation_to_entity(row)


__all__ = ["SqlAlchemyCoachRepository", "SqlAlchemyConversationRepository"]
