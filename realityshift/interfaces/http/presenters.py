# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""JSON shapes for the API envelope. Keys are camelCase, timestamps ISO 8601."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from flask import Response, jsonify

from realityshift.domain.coaching.entities import ChatMessage, CustomCoach, GoalSuggestion
from realityshift.domain.goals.entities import (
    Challenge,
    ChallengeLog,
    ChallengeTemplate,
    Goal,
    GoalDomain,
)
from realityshift.domain.habits.entities import Habit, HabitLog, InterpretedHabitLog
from realityshift.domain.journal.entities import DailySurvey, DiaryEntry
from realityshift.domain.users.entities import User, UserPreferences


def ok(data: Any = None, **extra: Any) -> Response:
    payload: dict[str, Any] = {"success": True}
    if data is not None:
        payload["data"] = data
    payload.update(extra)
    return jsonify(payload)


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def user_summary(user: User) -> dict[str, Any]:
    return {"id": user.id, "email": user.email, "displayName": user.display_name}


def preferences_to_json(prefs: UserPreferences) -> dict[str, Any]:
    return {
        "userId": prefs.user_id,
        "displayName": prefs.display_name,
        "preferredDifficulty": prefs.preferred_difficulty,
        "challengesPerDay": prefs.challenges_per_day,
        "realityShiftEnabled": prefs.reality_shift_enabled,
        "preferredChallengeTime": prefs.preferred_challenge_time,
        "focusAreas": list(prefs.focus_areas),
        "avoidAreas": list(prefs.avoid_areas),
        "aiPersonality": prefs.ai_personality,
        "includeScientificBasis": prefs.include_scientific_basis,
        "challengeLengthPreference": prefs.challenge_length_preference,
        "notificationsEnabled": prefs.notifications_enabled,
        "dailyReminderTime": prefs.daily_reminder_time,
        "streakReminders": prefs.streak_reminders,
        "theme": prefs.theme,
    }


def domain_to_json(domain: GoalDomain) -> dict[str, Any]:
    return {
        "id": domain.id,
        "name": domain.name,
        "icon": domain.icon,
        "color": domain.color,
        "description": domain.description,
        "examples": list(domain.examples),
    }


def goal_to_json(goal: Goal) -> dict[str, Any]:
    return {
        "id": goal.id,
        "userId": goal.user_id,
        "domainId": goal.domain_id,
        "title": goal.title,
        "description": goal.description,
        "currentState": goal.current_state,
        "desiredState": goal.desired_state,
        "difficultyLevel": goal.difficulty_level,
        "realityShiftEnabled": goal.reality_shift_enabled,
        "status": goal.status.value,
        "startedAt": _iso(goal.started_at),
        "createdAt": _iso(goal.created_at),
        "domain": domain_to_json(goal.domain) if goal.domain else None,
    }


def template_to_json(template: ChallengeTemplate) -> dict[str, Any]:
    return {
        "id": template.id,
        "domainId": template.domain_id,
        "title": template.title,
        "description": template.description,
        "instructions": template.instructions,
        "durationMinutes": template.duration_minutes,
        "difficulty": template.difficulty,
        "isRealityShift": template.is_reality_shift,
        "scientificReferences": list(template.scientific_references),
        "tags": list(template.tags),
        "successCriteria": template.success_criteria,
    }


def challenge_to_json(challenge: Challenge) -> dict[str, Any]:
    return {
        "id": challenge.id,
        "userId": challenge.user_id,
        "goalId": challenge.goal_id,
        "templateId": challenge.template_id,
        "title": challenge.title,
        "description": challenge.description,
        "personalizationNotes": challenge.personalization_notes,
        "difficulty": challenge.difficulty,
        "isRealityShift": challenge.is_reality_shift,
        "scheduledDate": _iso(challenge.scheduled_date),
        "status": challenge.status.value,
        "completedAt": _iso(challenge.completed_at),
        "skippedReason": challenge.skipped_reason,
        "createdAt": _iso(challenge.created_at),
        "goalTitle": challenge.goal_title,
        "instructions": challenge.instructions,
        "successCriteria": challenge.success_criteria,
        "scientificReferences": list(challenge.scientific_references),
    }


def challenge_log_to_json(log: ChallengeLog) -> dict[str, Any]:
    return {
        "id": log.id,
        "challengeId": log.challenge_id,
        "userId": log.user_id,
        "completedAt": _iso(log.completed_at),
        "difficultyFelt": log.difficulty_felt,
        "satisfaction": log.satisfaction,
        "notes": log.notes,
    }


def habit_to_json(habit: Habit) -> dict[str, Any]:
    return {
        "id": habit.id,
        "userId": habit.user_id,
        "goalId": habit.goal_id,
        "name": habit.name,
        "description": habit.description,
        "icon": habit.icon,
        "frequency": habit.frequency,
        "targetDays": list(habit.target_days),
        "isActive": habit.is_active,
        "createdAt": _iso(habit.created_at),
    }


def habit_log_to_json(log: HabitLog) -> dict[str, Any]:
    return {
        "id": log.id,
        "habitId": log.habit_id,
        "logDate": _iso(log.log_date),
        "completed": log.completed,
        "notes": log.notes,
        "source": log.source.value,
    }


def interpreted_log_to_json(log: InterpretedHabitLog) -> dict[str, Any]:
    return {
        "habitId": log.habit_id,
        "habitName": log.habit_name,
        "completed": log.completed,
        "notes": log.notes,
    }


def diary_entry_to_json(entry: DiaryEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "userId": entry.user_id,
        "goalId": entry.goal_id,
        "challengeId": entry.challenge_id,
        "entryType": entry.entry_type,
        "audioUrl": entry.audio_url,
        "audioDurationSeconds": entry.audio_duration_seconds,
        "transcript": entry.transcript,
        "moodScore": entry.mood_score,
        "aiSummary": entry.ai_summary,
        "createdAt": _iso(entry.created_at),
    }


def survey_to_json(survey: DailySurvey) -> dict[str, Any]:
    return {
        "id": survey.id,
        "userId": survey.user_id,
        "surveyDate": _iso(survey.survey_date),
        "energyLevel": survey.energy_level,
        "motivationLevel": survey.motivation_level,
        "overallMood": survey.overall_mood,
        "sleepQuality": survey.sleep_quality,
        "stressLevel": survey.stress_level,
        "biggestWin": survey.biggest_win,
        "biggestBlocker": survey.biggest_blocker,
        "gratitudeNote": survey.gratitude_note,
        "tomorrowIntention": survey.tomorrow_intention,
        "completionLevel": survey.completion_level,
    }


def coach_to_json(coach: CustomCoach) -> dict[str, Any]:
    return {
        "id": coach.id,
        "userId": coach.user_id,
        "name": coach.name,
        "icon": coach.icon,
        "color": coach.color,
        "systemPrompt": coach.system_prompt,
        "isGoalCoach": coach.is_goal_coach,
        "goalId": coach.goal_id,
        "createdAt": _iso(coach.created_at),
    }


def message_to_json(message: ChatMessage) -> dict[str, Any]:
    return message.to_dict()


def suggestion_to_json(suggestion: GoalSuggestion) -> dict[str, Any]:
    return {
        "domain": suggestion.domain,
        "title": suggestion.title,
        "currentState": suggestion.current_state,
        "desiredState": suggestion.desired_state,
        "why": suggestion.why,
        "difficulty": suggestion.difficulty,
    }
