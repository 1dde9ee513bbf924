# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from realityshift.shared.errors.base import DomainError


class GoalNotFoundError(DomainError):
    default_code = "goal_not_found"
    default_status = HTTPStatus.NOT_FOUND
    default_message = "Goal not found"


class ChallengeNotFoundError(DomainError):
    default_code = "challenge_not_found"
    default_status = HTTPStatus.NOT_FOUND
    default_message = "Challenge not found"


class TemplateNotFoundError(DomainError):
    default_code = "template_not_found"
    default_status = HTTPStatus.NOT_FOUND
    default_message = "Template not found"


class ChallengeAlreadyCompletedError(DomainError):
    default_code = "challenge_already_completed"
    default_message = "Challenge already completed"


class ChallengeAlreadySkippedError(DomainError):
    default_code = "challenge_already_skipped"
    default_message = "Challenge already skipped"


class InvalidGoalActionError(DomainError):
    default_code = "invalid_goal_action"
    default_message = "Invalid action"
