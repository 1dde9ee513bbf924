# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import date

from realityshift.domain.goals.entities import calculate_streak
from realityshift.domain.goals.repositories import ChallengeRepository
from realityshift.domain.habits.entities import utc_day

STREAK_WINDOW_DAYS = 30


def completion_streak(challenges: ChallengeRepository, user_id: str, today: date) -> int:
    recent = challenges.recent_completed(user_id, limit=STREAK_WINDOW_DAYS)
    days = {utc_day(challenge.completed_at) for challenge in recent if challenge.completed_at}
    return calculate_streak(days, today, window=STREAK_WINDOW_DAYS)
