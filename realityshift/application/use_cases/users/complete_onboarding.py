# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from realityshift.domain.users.repositories import UserRepository
from realityshift.shared.logging import logger


class CompleteOnboardingUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str, survey_data: Mapping[str, Any] | None) -> None:
        self._users.complete_onboarding(user_id, survey_data or {})
        logger.info(f"onboarding.complete: user_id={user_id}")
