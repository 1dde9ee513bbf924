# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Coach prompts and the two reply strategies behind expert chat."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from realityshift.application.interfaces import CoachResponder, MessagesPort
from realityshift.application.services.fallback import run_with_fallback
from realityshift.domain.coaching.entities import GENERAL_COACH, ProgressSnapshot

DEFAULT_ROLE = (
    "You are a Transformation Coach - an expert in habit formation, goal achievement, "
    "and personal development."
)

COACH_ROLES: dict[str, str] = {
    "languages": "You are a Language Learning Expert and Polyglot Coach. You focus on immersion strategies, overcoming speaking anxiety, and consistent practice.",
    "mobility": "You are a Mobility and Movement Coach. You focus on flexibility, joint health, and building a body that moves without pain.",
    "emotional": "You are an Emotional Intelligence Coach. You focus on emotional regulation, self-awareness, and building resilience.",
    "relationships": "You are a Relationship and Communication Coach. You focus on empathy, active listening, and building deeper connections.",
    "health": "You are a Health and Vitality Coach. You focus on sustainable fitness, nutrition habits, and physical energy.",
    "tolerance": "You are a Resilience and Tolerance Coach. You focus on getting comfortable with discomfort, stoicism, and mental toughness.",
    "skills": "You are a Skill Acquisition Expert. You focus on deliberate practice, the 80/20 rule of learning, and overcoming plateaus.",
    "habits": "You are a Habit Formation Expert. You focus on cue-routine-reward loops, environment design, and small atomic habits.",
}

WELCOME_MESSAGE = (
    "Hi! I'm your Transformation Coach. I'm here to help you achieve your goals and build "
    "lasting habits. What would you like to discuss today?"
)


def _mood(value: float) -> str:
    return f"{value:g}"


def _context_block(context: ProgressSnapshot) -> str:
    lines = ["", "=== USER'S CURRENT CONTEXT ==="]
    goal = context.active_goal
    if goal is not None:
        domain_name = goal.domain.name if goal.domain else "General"
        shift = "ON (wants extreme challenges)" if goal.reality_shift_enabled else "OFF"
        lines += [
            "",
            "📎 ACTIVE GOAL:",
            f'- Title: "{goal.title}"',
            f"- Domain: {domain_name}",
            f"- Day {context.day_in_journey} of 30-day journey",
            f'- Current state: "{goal.current_state or "Not specified"}"',
            f'- Desired state: "{goal.desired_state or "Not specified"}"',
            f"- Difficulty preference: {goal.difficulty_level}/10",
            f"- Reality Shift mode: {shift}",
        ]
    else:
        lines += ["", "⚠️ User has no active goal set yet. Encourage them to set one!"]

    lines += [
        "",
        "📊 PROGRESS:",
        f"- Current streak: {context.streak} days",
        f"- Challenges completed: {context.completed_count}",
        f"- Total challenges attempted: {context.total_challenges}",
    ]
    if context.average_mood is not None:
        lines.append(f"- Average mood (last 7 days): {_mood(context.average_mood)}/10")

    today = context.today_challenge
    if today is not None:
        lines += [
            "",
            "🎯 TODAY'S CHALLENGE:",
            f'- "{today.title}"',
            f"- Difficulty: {today.difficulty}/10",
            f"- Status: {today.status.value}",
        ]
        if today.description:
            lines.append(f"- Description: {today.description}")

    if context.recent_challenges:
        lines += ["", "📋 RECENT CHALLENGES:"]
        for challenge in context.recent_challenges[:3]:
            lines.append(
                f'- "{challenge.title}" ({challenge.status.value}, difficulty {challenge.difficulty}/10)'
            )

    lines += ["", "=== END OF CONTEXT ==="]
    return "\n".join(lines) + "\n"


def build_coach_system_prompt(
    context: ProgressSnapshot | None,
    coach_id: str | None = None,
    *,
    custom_role: str | None = None,
) -> str:
    role = custom_role or COACH_ROLES.get(coach_id or "", DEFAULT_ROLE)
    prompt = (
        f"{role} You're warm, encouraging, and evidence-based in your approach.\n\n"
        "Your role is to help users:\n"
        "- Stay motivated on their 30-day transformation journeys\n"
        "- Build consistent habits\n"
        "- Overcome challenges and setbacks\n"
        "- Process emotions around change\n"
        "- Celebrate wins (big and small)\n"
    )
    if coach_id and coach_id != GENERAL_COACH:
        prompt += (
            f"\nIMPORTANT: Stay STRICTLY within your domain of expertise ({coach_id}). "
            "If the user asks about something totally unrelated, gently guide them to the "
            "General Coach or the appropriate specialist, but try to find a metaphor in your "
            "domain if possible.\n"
        )
    prompt += (
        "\nGuidelines:\n"
        "- Keep responses concise (2-4 paragraphs max)\n"
        "- Use specific, actionable advice\n"
        "- Reference their ACTUAL goals and progress when relevant\n"
        "- Be empathetic but also gently push users out of comfort zones\n"
        "- Use occasional emojis to be warm but not excessive\n"
        "- Ask follow-up questions to understand their situation better\n\n"
    )
    if context is not None:
        prompt += _context_block(context)
    prompt += (
        "\nRemember to reference this context naturally when relevant. For example, if they "
        "mention struggling, relate it to their specific goal or challenge. Celebrate their "
        "streak if it's going well!"
    )
    return prompt


def contextual_reply(message: str, context: ProgressSnapshot | None) -> str:
    """Canned but personalised answer used when no model is reachable."""

    context = context or ProgressSnapshot()
    goal_name = context.active_goal.title if context.active_goal else "your goal"
    streak = context.streak
    lowered = message.lower()

    if "motivation" in lowered or "struggling" in lowered:
        streak_line = (
            f"You've got a {streak}-day streak going - that's not nothing! Let's protect it."
            if streak > 0
            else "Every day is a chance to start fresh."
        )
        return (
            f'I see you\'re working on "{goal_name}" and you\'re on day {context.day_in_journey or 1}. '
            "That's real commitment! 💪\n\n"
            "When motivation dips, remember why you started. What was the spark that made you want this change?\n\n"
            f"{streak_line}\n\n"
            "What specific part feels hardest right now?"
        )

    if "progress" in lowered or "how am i doing" in lowered:
        stats = []
        if context.active_goal:
            stats.append(f'You\'re on Day {context.day_in_journey} of your "{goal_name}" journey.')
        if context.completed_count:
            stats.append(f"You've completed {context.completed_count} challenges.")
        if streak > 0:
            stats.append(f"Current streak: {streak} days! 🔥")
        if context.average_mood is not None:
            stats.append(f"Your average mood this week: {_mood(context.average_mood)}/10")
        momentum = (
            "You're building real momentum!"
            if context.completed_count > 5
            else "Every completed challenge builds the foundation."
        )
        body = "\n".join(stats)
        return f"Let me check your stats! 📊\n\n{body}\n\n{momentum}\n\nWhat would you like to focus on next?"

    reply = f'I\'m here to help with your journey toward "{goal_name}".\n\n'
    if context.today_challenge is not None:
        reply += f'I see today\'s challenge is "{context.today_challenge.title}" - how\'s that going?\n\n'
    return reply + "What's on your mind?"


class AICoachResponder(CoachResponder):
    def __init__(self, messages: MessagesPort, *, max_tokens: int = 600, history_window: int = 6) -> None:
        self._messages = messages
        self._max_tokens = max_tokens
        self._history_window = history_window

    async def reply(
        self,
        message: str,
        *,
        system_prompt: str,
        history: Sequence[Mapping[str, str]],
        context: ProgressSnapshot,
    ) -> str:
        turns = [
            {"role": item["role"], "content": item["content"]}
            for item in list(history)[-self._history_window:]
            if item.get("role") in ("user", "assistant") and item.get("content")
        ]
        turns.append({"role": "user", "content": message})
        text = await self._messages.complete(
            system=system_prompt,
            messages=turns,
            max_tokens=self._max_tokens,
        )
        return text or contextual_reply(message, context)


class ContextualCoachResponder(CoachResponder):
    async def reply(
        self,
        message: str,
        *,
        system_prompt: str,
        history: Sequence[Mapping[str, str]],
        context: ProgressSnapshot,
    ) -> str:
        return contextual_reply(message, context)


class FallbackCoachResponder(CoachResponder):
    def __init__(self, primary: CoachResponder, fallback: CoachResponder) -> None:
        self._primary = primary
        self._fallback = fallback

    async def reply(
        self,
        message: str,
        *,
        system_prompt: str,
        history: Sequence[Mapping[str, str]],
        context: ProgressSnapshot,
    ) -> str:
        return await run_with_fallback(
            lambda: self._primary.reply(
                message, system_prompt=system_prompt, history=history, context=context
            ),
            lambda: self._fallback.reply(
                message, system_prompt=system_prompt, history=history, context=context
            ),
            label="expert.chat",
        )


__all__ = [
    "AICoachResponder",
    "COACH_ROLES",
    "ContextualCoachResponder",
    "FallbackCoachResponder",
    "WELCOME_MESSAGE",
    "build_coach_system_prompt",
    "contextual_reply",
]
