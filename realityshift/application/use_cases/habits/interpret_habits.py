# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from realityshift.application.interfaces import HabitInterpreter
from realityshift.domain.habits.entities import Interpretation
from realityshift.domain.habits.repositories import HabitRepository
from realityshift.infrastructure.http import RequestTimeoutError
from realityshift.shared.errors import UpstreamTimeoutError, ValidationError
from realityshift.shared.logging import logger

NO_HABITS_MESSAGE = "No habits configured. Please create some habits first."
TIMEOUT_MESSAGE = "AI interpretation timed out. Please try again."


class InterpretHabitsUseCase:
    """Turn a spoken summary of the day into proposed habit logs. Nothing is persisted."""

    def __init__(self, *, habits: HabitRepository, interpreter: HabitInterpreter) -> None:
        self._habits = habits
        self._interpreter = interpreter

    async def execute(self, user_id: str, transcript: str | None) -> Interpretation:
        if not transcript or not transcript.strip():
            raise ValidationError("Transcript is required")

        habits = self._habits.list_for_user(user_id)
        if not habits:
            return Interpretation(logs=(), message=NO_HABITS_MESSAGE)

        try:
            interpretation = await self._interpreter.interpret(transcript, habits)
        except RequestTimeoutError as exc:
            logger.warning(f"habits.interpret: {exc}")
            raise UpstreamTimeoutError(TIMEOUT_MESSAGE) from exc

        logger.info(
            f"habits.interpret: logs={len(interpretation.logs)} fallback={interpretation.fallback_mode}"
        )
        return interpretation
