# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence

from realityshift.domain.journal.entities import DiaryEntry
from realityshift.domain.journal.repositories import DiaryRepository


class AddDiaryEntryUseCase:
    def __init__(self, *, diary: DiaryRepository) -> None:
        self._diary = diary

    def execute(
        self,
        user_id: str,
        *,
        transcript: str | None = None,
        audio_duration_seconds: int | None = None,
        mood_score: int | None = None,
        goal_id: str | None = None,
        challenge_id: str | None = None,
    ) -> DiaryEntry:
        # Audio is transcribed client-side; only the text is stored
        return self._diary.add(
            DiaryEntry(
                id="",
                user_id=user_id,
                entry_type="voice",
                transcript=transcript,
                audio_duration_seconds=audio_duration_seconds,
                mood_score=mood_score,
                goal_id=goal_id,
                challenge_id=challenge_id,
            )
        )


class ListDiaryEntriesUseCase:
    def __init__(self, *, diary: DiaryRepository, limit: int = 20) -> None:
        self._diary = diary
        self._limit = limit

    def execute(self, user_id: str) -> Sequence[DiaryEntry]:
        return self._diary.list_for_user(user_id, limit=self._limit)
