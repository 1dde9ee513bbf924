# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from realityshift.domain.goals.entities import Challenge, Goal

EXPERT_CHAT = "expert_chat"
GENERAL_COACH = "general"


@dataclass(slots=True, frozen=True)
class ChatMessage:

    role: str
    content: str
    timestamp: datetime

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content, "timestamp": self.timestamp.isoformat()}


@dataclass(slots=True, frozen=True)
class Conversation:

    id: str
    user_id: str
    conversation_type: str
    title: str | None = None
    goal_id: str | None = None
    messages: tuple[ChatMessage, ...] = ()
    context: Mapping[str, Any] = field(default_factory=dict)
    updated_at: datetime | None = None

    @property
    def coach_id(self) -> str:
        return str(self.context.get("coachId") or GENERAL_COACH)


@dataclass(slots=True, frozen=True)
class CustomCoach:

    id: str
    user_id: str
    name: str
    system_prompt: str
    icon: str = "🤖"
    color: str = "#8b5cf6"
    is_goal_coach: bool = False
    goal_id: str | None = None
    created_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class GoalSuggestion:

    domain: str
    title: str
    current_state: str
    desired_state: str
    why: str
    difficulty: int


@dataclass(slots=True, frozen=True)
class SuggestionSet:

    suggestions: tuple[GoalSuggestion, ...]
    fallback: bool = False


@dataclass(slots=True, frozen=True)
class ProgressSnapshot:
    """What a coach knows about the user when composing a reply."""

    active_goal: Goal | None = None
    day_in_journey: int = 0
    today_challenge: Challenge | None = None
    completed_count: int = 0
    total_challenges: int = 0
    streak: int = 0
    average_mood: float | None = None
    recent_challenges: tuple[Challenge, ...] = ()
