# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from realityshift.application.interfaces import GoalSuggester, MessagesPort
from realityshift.application.services.fallback import run_with_fallback
from realityshift.domain.coaching.entities import GoalSuggestion, SuggestionSet

MAX_SUGGESTIONS = 5

GOAL_SUGGESTION_PROMPT = """You are an expert life coach analyzing a new user's responses to suggest personalized transformation goals.

IMPORTANT: Return ONLY valid JSON. No markdown, no explanations, no extra text.

Generate exactly 5 personalized goal suggestions as a JSON array. Each goal should:
1. Match one of these domains: Languages, Mobility, Emotional Growth, Relationships, Physical Health, Tolerance, Skills, Habits
2. Have a clear current state and desired state
3. Be achievable in 30 days with the time the user has available
4. Address their biggest challenge
5. Include a brief "why" explanation tailored to their motivation

FORMAT (return this exact structure):
[
  {
    "domain": "Physical Health",
    "title": "30-Day Walking Habit",
    "currentState": "Sedentary desk job, no regular exercise",
    "desiredState": "Walking 10,000 steps daily with consistent energy",
    "why": "Walking is the perfect low-barrier entry point that builds consistency without overwhelming you. It addresses your 'starting' challenge by being simple and immediate.",
    "difficulty": 4
  }
]"""

DEFAULT_SUGGESTIONS: tuple[GoalSuggestion, ...] = (
    GoalSuggestion(
        domain="Physical Health",
        title="30-Day Walking Habit",
        current_state="Limited physical activity",
        desired_state="Walking 10,000 steps daily",
        why="Walking is a low-barrier way to build consistency and improve overall health.",
        difficulty=4,
    ),
    GoalSuggestion(
        domain="Habits",
        title="Morning Routine Mastery",
        current_state="Inconsistent morning habits",
        desired_state="Structured 30-minute morning routine",
        why="A solid morning routine sets the tone for your entire day and builds discipline.",
        difficulty=5,
    ),
    GoalSuggestion(
        domain="Emotional Growth",
        title="Daily Gratitude Practice",
        current_state="Focus on negatives",
        desired_state="Writing 3 gratitudes daily",
        why="Gratitude rewires your brain for positivity and resilience.",
        difficulty=3,
    ),
    GoalSuggestion(
        domain="Skills",
        title="Learn Something New Daily",
        current_state="Stagnant learning",
        desired_state="30 minutes of skill-building daily",
        why="Consistent learning keeps your mind sharp and opens new opportunities.",
        difficulty=5,
    ),
    GoalSuggestion(
        domain="Relationships",
        title="Deepen One Connection",
        current_state="Surface-level relationships",
        desired_state="Meaningful conversations weekly",
        why="Strong relationships are the foundation of happiness and well-being.",
        difficulty=6,
    ),
)


def build_answers_message(answers: Mapping[str, Any]) -> str:
    return (
        "\nUSER RESPONSES:\n"
        f'- Motivation: "{answers.get("motivation") or "Not specified"}"\n'
        f'- Current Situation: "{answers.get("currentSituation") or "Not specified"}"\n'
        f'- Time Available Daily: "{answers.get("timeAvailable") or "30-60 minutes"}"\n'
        f'- Biggest Challenge: "{answers.get("biggestChallenge") or "Consistency"}"\n\n'
        "Based on these responses, generate 5 personalized goal suggestions.\n"
    )


def _difficulty(value: Any) -> int:
    try:
        return max(1, min(10, int(value)))
    except (TypeError, ValueError):
        return 5


def parse_suggestions(text: str) -> list[GoalSuggestion]:
    """Pull the outermost JSON array out of ``text``; raise ``ValueError`` when there is none."""

    start, end = text.find("["), text.rfind("]")
    if start == -1 or end <= start:
        raise ValueError("No JSON array found in response")
    items = json.loads(text[start : end + 1])
    if not isinstance(items, list) or not items:
        raise ValueError("Invalid suggestions format")
    return [
        GoalSuggestion(
            domain=str(item.get("domain") or ""),
            title=str(item.get("title") or ""),
            current_state=str(item.get("currentState") or ""),
            desired_state=str(item.get("desiredState") or ""),
            why=str(item.get("why") or ""),
            difficulty=_difficulty(item.get("difficulty")),
        )
        for item in items[:MAX_SUGGESTIONS]
        if isinstance(item, dict)
    ]


class AIGoalSuggester(GoalSuggester):
    def __init__(self, messages: MessagesPort, *, max_tokens: int = 2000) -> None:
        self._messages = messages
        self._max_tokens = max_tokens

    async def suggest(self, answers: Mapping[str, Any]) -> SuggestionSet:
        text = await self._messages.complete(
            system=GOAL_SUGGESTION_PROMPT,
            messages=[{"role": "user", "content": build_answers_message(answers)}],
            max_tokens=self._max_tokens,
        )
        return SuggestionSet(suggestions=tuple(parse_suggestions(text)))


class DefaultGoalSuggester(GoalSuggester):
    async def suggest(self, answers: Mapping[str, Any]) -> SuggestionSet:
        return SuggestionSet(suggestions=DEFAULT_SUGGESTIONS, fallback=True)


class FallbackGoalSuggester(GoalSuggester):
    def __init__(self, primary: GoalSuggester, fallback: GoalSuggester) -> None:
        self._primary = primary
        self._fallback = fallback

    async def suggest(self, answers: Mapping[str, Any]) -> SuggestionSet:
        return await run_with_fallback(
            lambda: self._primary.suggest(answers),
            lambda: self._fallback.suggest(answers),
            label="onboarding.analyze",
        )


__all__ = [
    "AIGoalSuggester",
    "DEFAULT_SUGGESTIONS",
    "DefaultGoalSuggester",
    "FallbackGoalSuggester",
    "GOAL_SUGGESTION_PROMPT",
    "build_answers_message",
    "parse_suggestions",
]
