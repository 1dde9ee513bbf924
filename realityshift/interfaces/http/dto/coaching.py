# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from .base import CamelModel


class CreateCoachDTO(CamelModel):
    name: str | None = None
    system_prompt: str | None = None
    icon: str | None = None
    color: str | None = None
    is_goal_coach: bool = False
    goal_id: str | None = None


class ChatTurnDTO(CamelModel):
    role: str
    content: str


class ExpertChatDTO(CamelModel):
    message: str | None = None
    coach_id: str | None = None
    history: list[ChatTurnDTO] | None = None


class OnboardingAnalyzeDTO(CamelModel):
    answers: dict[str, Any] | None = None


class OnboardingCompleteDTO(CamelModel):
    survey_data: dict[str, Any] | None = None
