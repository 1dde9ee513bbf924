# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Strategies that turn a spoken check-in into habit log suggestions."""

from __future__ import annotations

import json
import re
from collections.abc import Sequence

from realityshift.application.interfaces import HabitInterpreter, MessagesPort
from realityshift.application.services.fallback import run_with_fallback
from realityshift.domain.habits.entities import Habit, InterpretedHabitLog, Interpretation
from realityshift.shared.logging import logger

PARSE_ERROR_MESSAGE = "Failed to parse AI response, please log manually"
KEYWORD_NOTE = "(AI unavailable - matched by keyword)"
KEYWORD_MESSAGE = "AI unavailable, used simple keyword matching"

_NEGATIVES = ("skip", "missed", "didn't", "did not", "forgot", "no ")
_FENCE = re.compile(r"```json\n?|\n?```")


def build_interpretation_prompt(habits: Sequence[Habit]) -> str:
    habits_list = "\n".join(f'- "{habit.name}" (ID: {habit.id})' for habit in habits)
    return f"""You are a habit tracking assistant. Your job is to analyze a user's voice transcript and determine which habits they completed or didn't complete.

The user has the following habits:
{habits_list}

Based on the transcript, output a JSON array of interpreted habit logs. For each habit mentioned (explicitly or implicitly), include:
- habitId: the ID from the list above
- habitName: the name of the habit
- completed: true if they did it, false if they skipped/missed it
- notes: any relevant context extracted from the transcript (e.g., "felt great", "was too tired", "did 20 minutes instead of 30")

ONLY include habits that are actually mentioned or clearly implied in the transcript. Do NOT include habits that weren't discussed.

If no habits are mentioned, return an empty array.

Output ONLY valid JSON, no markdown, no explanation. Format:
[{{"habitId": "...", "habitName": "...", "completed": true/false, "notes": "..."}}]"""


class AIHabitInterpreter(HabitInterpreter):
    def __init__(self, messages: MessagesPort, *, timeout_ms: int = 30_000, max_tokens: int = 1000) -> None:
        self._messages = messages
        self._timeout_ms = timeout_ms
        self._max_tokens = max_tokens

    async def interpret(self, transcript: str, habits: Sequence[Habit]) -> Interpretation:
        user_message = f"Here's what the user said about their habits today:\n\n\"{transcript.strip()}\""
        reply = await self._messages.complete(
            system=build_interpretation_prompt(habits),
            messages=[{"role": "user", "content": user_message}],
            max_tokens=self._max_tokens,
            timeout_ms=self._timeout_ms,
        )
        reply = reply or "[]"
        cleaned = _FENCE.sub("", reply).strip()
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError:
            parsed = None
        if not isinstance(parsed, list):
            logger.warning("habits.interpret: AI reply is not a JSON array")
            return Interpretation(logs=(), raw_response=reply, parse_error=PARSE_ERROR_MESSAGE)

        by_id = {habit.id: habit for habit in habits}
        logs = []
        for item in parsed:
            if not isinstance(item, dict):
                continue
            habit = by_id.get(item.get("habitId"))
            if habit is None:
                continue
            logs.append(
                InterpretedHabitLog(
                    habit_id=habit.id,
                    habit_name=str(item.get("habitName") or habit.name),
                    completed=bool(item.get("completed")),
                    notes=item.get("notes"),
                )
            )
        return Interpretation(logs=tuple(logs))


class KeywordHabitInterpreter(HabitInterpreter):
    """Marks a habit when its name appears in the transcript, negated by nearby skip words."""

    async def interpret(self, transcript: str, habits: Sequence[Habit]) -> Interpretation:
        spoken = transcript.lower()
        logs = []
        for habit in habits:
            name = habit.name.lower()
            if name not in spoken:
                continue
            negative = any(
                f"{neg}{name}" in spoken
                or f"{name}{'' if neg.endswith(' ') else ' '}skip" in spoken
                for neg in _NEGATIVES
            )
            logs.append(
                InterpretedHabitLog(
                    habit_id=habit.id,
                    habit_name=habit.name,
                    completed=not negative,
                    notes=KEYWORD_NOTE,
                )
            )
        return Interpretation(logs=tuple(logs), fallback_mode=True, message=KEYWORD_MESSAGE)


class FallbackInterpreter(HabitInterpreter):
    def __init__(self, primary: HabitInterpreter, fallback: HabitInterpreter) -> None:
        self._primary = primary
        self._fallback = fallback

    async def interpret(self, transcript: str, habits: Sequence[Habit]) -> Interpretation:
        return await run_with_fallback(
            lambda: self._primary.interpret(transcript, habits),
            lambda: self._fallback.interpret(transcript, habits),
            label="habits.interpret",
        )


__all__ = [
    "AIHabitInterpreter",
    "FallbackInterpreter",
    "KeywordHabitInterpreter",
    "build_interpretation_prompt",
]
