# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence

from realityshift.domain.goals.entities import Challenge, Goal
from realityshift.domain.users.entities import UserPreferences


def build_challenge_prompt(
    preferences: UserPreferences,
    goal: Goal,
    recent: Sequence[Challenge] = (),
) -> str:
    history = (
        "\n".join(f"- {challenge.title} (Difficulty: {challenge.difficulty})" for challenge in recent)
        if recent
        else "No recent history."
    )
    shift = "ON" if preferences.reality_shift_enabled else "OFF"
    return f"""
    Generate a challenge for a user with the goal: "{goal.title}" ({goal.description}).
    Current State: {goal.current_state}
    Desired State: {goal.desired_state}

    User Preferences:
    - Difficulty: {preferences.preferred_difficulty}/10
    - Focus Areas: {', '.join(preferences.focus_areas)}
    - Avoid: {', '.join(preferences.avoid_areas)}
    - Reality Shift: {shift}

    Recent Completed Challenges:
    {history}

    Instructions:
    - Do NOT repeat recent challenges.
    - If Reality Shift is ON, slightly increase difficulty from preference.
    - Otherwise, keep it consistent with preference.

    Return a JSON object with:
    - title
    - description
    - instructions
    - difficulty (number 1-10)
    - isRealityShift (boolean)
    - estimatedDuration (minutes)
  """


__all__ = ["build_challenge_prompt"]
