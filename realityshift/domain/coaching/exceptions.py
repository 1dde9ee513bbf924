# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from realityshift.shared.errors.base import DomainError


class CoachNotFoundError(DomainError):
    default_code = "coach_not_found"
    default_status = HTTPStatus.NOT_FOUND
    default_message = "Coach not found"
