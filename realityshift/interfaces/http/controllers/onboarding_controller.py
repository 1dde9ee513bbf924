# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint

from realityshift.application.use_cases.coaching.onboarding import AnalyzeOnboardingUseCase
from realityshift.application.use_cases.users.complete_onboarding import (
    CompleteOnboardingUseCase,
)
from realityshift.interfaces.http.auth import auth_required, current_user_id
from realityshift.interfaces.http.dto.base import parse_json
from realityshift.interfaces.http.dto.coaching import OnboardingAnalyzeDTO, OnboardingCompleteDTO
from realityshift.interfaces.http.presenters import ok, suggestion_to_json
from realityshift.utils.asyncio_utils import run_async


class OnboardingController:
    def __init__(
        self,
        *,
        analyze_use_case: AnalyzeOnboardingUseCase,
        complete_use_case: CompleteOnboardingUseCase,
    ) -> None:
        self._analyze = analyze_use_case
        self._complete = complete_use_case

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("onboarding", __name__, url_prefix="/api/onboarding")
        bp.add_url_rule("/analyze", view_func=self.analyze, methods=["POST"], endpoint="onboarding_analyze")
        bp.add_url_rule(
            "/complete", view_func=self.complete, methods=["POST"], endpoint="onboarding_complete"
        )
        return bp

    @auth_required
    def analyze(self):
        dto = parse_json(OnboardingAnalyzeDTO)
        result = run_async(self._analyze.execute(dto.answers))
        data: dict[str, object] = {
            "suggestions": [suggestion_to_json(s) for s in result.suggestions]
        }
        if result.fallback:
            data["fallback"] = True
        return ok(data)

    @auth_required
    def complete(self):
        dto = parse_json(OnboardingCompleteDTO)
        self._complete.execute(current_user_id(), dto.survey_data)
        return ok(message="Onboarding completed successfully")
