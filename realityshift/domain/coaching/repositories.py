# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from .entities import ChatMessage, Conversation, CustomCoach


class CoachRepository(Protocol):
    def add(self, coach: CustomCoach) -> CustomCoach: ...
    def list_for_user(self, user_id: str) -> Sequence[CustomCoach]: ...
    def get_for_user(self, coach_id: str, user_id: str) -> CustomCoach | None: ...
    def delete_for_user(self, coach_id: str, user_id: str) -> bool: ...


class ConversationRepository(Protocol):
    def find_for_coach(self, user_id: str, coach_id: str) -> Conversation | None: ...
    def create(
        self,
        user_id: str,
        conversation_type: str,
        *,
        title: str | None,
        context: Mapping[str, Any],
    ) -> Conversation: ...
    def replace_messages(self, conversation_id: str, messages: Sequence[ChatMessage]) -> Conversation: ...
