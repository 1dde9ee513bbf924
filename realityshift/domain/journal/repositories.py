# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Protocol

from .entities import DailySurvey, DiaryEntry


class DiaryRepository(Protocol):
    def add(self, entry: DiaryEntry) -> DiaryEntry: ...
    def list_for_user(self, user_id: str, *, limit: int = 20) -> Sequence[DiaryEntry]: ...


class SurveyRepository(Protocol):
    def upsert(self, survey: DailySurvey) -> DailySurvey: ...
    def since(self, user_id: str, start: date) -> Sequence[DailySurvey]: ...
