# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from realityshift.domain.coaching.entities import ProgressSnapshot, SuggestionSet
from realityshift.domain.habits.entities import Habit, Interpretation


class MessagesPort(Protocol):
    """Text completion over a system prompt plus a short message history."""

    @property
    def configured(self) -> bool: ...

    async def complete(
        self,
        *,
        system: str,
        messages: Sequence[Mapping[str, str]],
        max_tokens: int,
        timeout_ms: int | None = None,
    ) -> str: ...


class ChallengeGeneratorPort(Protocol):
    async def generate_challenge(self, prompt: str) -> dict[str, Any]: ...


class TranscriptionPort(Protocol):
    async def transcribe(self, filename: str, content: bytes, content_type: str | None = None) -> str: ...


class SpeechPort(Protocol):
    async def synthesize(self, text: str, *, voice: str = "nova") -> bytes: ...


class HabitInterpreter(Protocol):
    async def interpret(self, transcript: str, habits: Sequence[Habit]) -> Interpretation: ...


class CoachResponder(Protocol):
    async def reply(
        self,
        message: str,
        *,
        system_prompt: str,
        history: Sequence[Mapping[str, str]],
        context: ProgressSnapshot,
    ) -> str: ...


class GoalSuggester(Protocol):
    async def suggest(self, answers: Mapping[str, Any]) -> SuggestionSet: ...


__all__ = [
    "ChallengeGeneratorPort",
    "CoachResponder",
    "GoalSuggester",
    "HabitInterpreter",
    "MessagesPort",
    "SpeechPort",
    "TranscriptionPort",
]
