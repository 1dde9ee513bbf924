# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from realityshift.application.interfaces import GoalSuggester
from realityshift.domain.coaching.entities import SuggestionSet
from realityshift.infrastructure.http import RequestTimeoutError
from realityshift.shared.errors import UpstreamTimeoutError, ValidationError


class AnalyzeOnboardingUseCase:
    def __init__(self, *, suggester: GoalSuggester) -> None:
        self._suggester = suggester

    async def execute(self, answers: Mapping[str, Any] | None) -> SuggestionSet:
        if not answers:
            raise ValidationError("Survey answers are required")
        try:
            return await self._suggester.suggest(answers)
        except RequestTimeoutError as exc:
            raise UpstreamTimeoutError(str(exc)) from exc
