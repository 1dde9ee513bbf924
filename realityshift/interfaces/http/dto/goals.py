# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import date

from pydantic import Field

from .base import CamelModel


class CreateGoalDTO(CamelModel):
    title: str | None = None
    domain_id: int | None = None
    description: str | None = None
    current_state: str | None = None
    desired_state: str | None = None
    difficulty_level: int = Field(5, ge=1, le=10)
    reality_shift_enabled: bool = False


class GenerateChallengeDTO(CamelModel):
    goal_id: str | None = None


class CompleteChallengeDTO(CamelModel):
    difficulty_felt: int | None = Field(None, ge=1, le=10)
    satisfaction: int | None = Field(None, ge=1, le=10)
    notes: str | None = None


class SkipChallengeDTO(CamelModel):
    reason: str | None = None


class AcceptTemplateDTO(CamelModel):
    template_id: str | None = None
    scheduled_date: date | None = None
