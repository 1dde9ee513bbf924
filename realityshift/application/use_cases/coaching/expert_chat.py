# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime

from realityshift.application.interfaces import CoachResponder
from realityshift.application.services.coaching import (
    COACH_ROLES,
    WELCOME_MESSAGE,
    build_coach_system_prompt,
)
from realityshift.domain.coaching.entities import EXPERT_CHAT, GENERAL_COACH, ChatMessage
from realityshift.domain.coaching.repositories import CoachRepository, ConversationRepository
from realityshift.infrastructure.http import RequestTimeoutError
from realityshift.shared.errors import UpstreamTimeoutError, ValidationError
from realityshift.shared.logging import logger

from .progress import ProgressSnapshotBuilder

CONVERSATION_TITLE = "Transformation Coaching"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class GetChatHistoryUseCase:
    def __init__(
        self,
        *,
        conversations: ConversationRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._conversations = conversations
        self._clock = clock

    def execute(self, user_id: str, coach_id: str | None = None) -> list[ChatMessage]:
        conversation = self._conversations.find_for_coach(user_id, coach_id or GENERAL_COACH)
        if conversation is not None and conversation.messages:
            return list(conversation.messages)
        return [ChatMessage(role="assistant", content=WELCOME_MESSAGE, timestamp=self._clock())]


class ExpertChatUseCase:
    """One coaching turn: build context, get a reply, append both turns to the thread."""

    def __init__(
        self,
        *,
        progress: ProgressSnapshotBuilder,
        coaches: CoachRepository,
        conversations: ConversationRepository,
        responder: CoachResponder,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._progress = progress
        self._coaches = coaches
        self._conversations = conversations
        self._responder = responder
        self._clock = clock

    def _custom_role(self, user_id: str, coach_id: str) -> str | None:
        if coach_id == GENERAL_COACH or coach_id in COACH_ROLES:
            return None
        coach = self._coaches.get_for_user(coach_id, user_id)
        return coach.system_prompt if coach else None

    async def execute(
        self,
        user_id: str,
        message: str | None,
        *,
        coach_id: str | None = None,
        history: Sequence[Mapping[str, str]] | None = None,
    ) -> str:
        if not message or not message.strip():
            raise ValidationError("Message is required")

        coach_id = coach_id or GENERAL_COACH
        context = self._progress.build(user_id)
        system_prompt = build_coach_system_prompt(
            context, coach_id, custom_role=self._custom_role(user_id, coach_id)
        )

        conversation = self._conversations.find_for_coach(user_id, coach_id)
        if conversation is None:
            conversation = self._conversations.create(
                user_id,
                EXPERT_CHAT,
                title=CONVERSATION_TITLE,
                context={"coachId": coach_id},
            )
        if history is None:
            history = [{"role": m.role, "content": m.content} for m in conversation.messages]

        asked_at = self._clock()
        try:
            reply = await self._responder.reply(
                message, system_prompt=system_prompt, history=history, context=context
            )
        except RequestTimeoutError as exc:
            raise UpstreamTimeoutError(str(exc)) from exc

        self._conversations.replace_messages(
            conversation.id,
            [
                *conversation.messages,
                ChatMessage(role="user", content=message, timestamp=asked_at),
                ChatMessage(role="assistant", content=reply, timestamp=self._clock()),
            ],
        )
        logger.info(f"expert.chat: coach={coach_id} conversation_id={conversation.id}")
        return reply
