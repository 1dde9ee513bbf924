# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import date

from flask import Blueprint, request

from realityshift.application.use_cases.habits.interpret_habits import InterpretHabitsUseCase
from realityshift.application.use_cases.habits.log_habits import (
    GetHabitDayUseCase,
    LogHabitsUseCase,
    LogRequest,
)
from realityshift.application.use_cases.habits.manage_habits import (
    CreateHabitUseCase,
    DeleteHabitUseCase,
    ListHabitsUseCase,
    UpdateHabitUseCase,
)
from realityshift.interfaces.http.auth import auth_required, current_user_id
from realityshift.interfaces.http.dto.base import parse_json
from realityshift.interfaces.http.dto.habits import (
    CreateHabitDTO,
    HabitLogDTO,
    InterpretDTO,
    UpdateHabitDTO,
)
from realityshift.interfaces.http.presenters import (
    habit_log_to_json,
    habit_to_json,
    interpreted_log_to_json,
    ok,
)
from realityshift.shared.errors import ValidationError
from realityshift.utils.asyncio_utils import run_async


def _parse_day(raw: str | None) -> date | None:
    if not raw:
        return None
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        raise ValidationError("Invalid date") from None


class HabitsController:
    def __init__(
        self,
        *,
        list_use_case: ListHabitsUseCase,
        create_use_case: CreateHabitUseCase,
        update_use_case: UpdateHabitUseCase,
        delete_use_case: DeleteHabitUseCase,
        day_use_case: GetHabitDayUseCase,
        log_use_case: LogHabitsUseCase,
        interpret_use_case: InterpretHabitsUseCase,
    ) -> None:
        self._list = list_use_case
        self._create = create_use_case
        self._update = update_use_case
        self._delete = delete_use_case
        self._day = day_use_case
        self._log = log_use_case
        self._interpret = interpret_use_case

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("habits", __name__, url_prefix="/api/habits")
        bp.add_url_rule("", view_func=self.list_habits, methods=["GET"], endpoint="habits_list")
        bp.add_url_rule("", view_func=self.create_habit, methods=["POST"], endpoint="habits_create")
        bp.add_url_rule("", view_func=self.update_habit, methods=["PUT"], endpoint="habits_update")
        bp.add_url_rule("", view_func=self.delete_habit, methods=["DELETE"], endpoint="habits_delete")
        bp.add_url_rule("/log", view_func=self.get_day, methods=["GET"], endpoint="habits_log_get")
        bp.add_url_rule("/log", view_func=self.log_habits, methods=["POST"], endpoint="habits_log_post")
        bp.add_url_rule(
            "/interpret", view_func=self.interpret, methods=["POST"], endpoint="habits_interpret"
        )
        return bp

    @auth_required
    def list_habits(self):
        include_inactive = request.args.get("includeInactive") == "true"
        statuses = self._list.execute(current_user_id(), include_inactive=include_inactive)
        habits = []
        for status in statuses:
            item = habit_to_json(status.habit)
            item.update(
                completedToday=status.completed_today,
                todayNotes=status.today_notes,
                streak=status.streak,
            )
            habits.append(item)
        return ok({"habits": habits})

    @auth_required
    def create_habit(self):
        dto = parse_json(CreateHabitDTO)
        habit = self._create.execute(
            current_user_id(),
            dto.name,
            description=dto.description,
            icon=dto.icon,
            frequency=dto.frequency,
            target_days=dto.target_days,
            goal_id=dto.goal_id,
        )
        return ok({"habit": habit_to_json(habit)})

    @auth_required
    def update_habit(self):
        dto = parse_json(UpdateHabitDTO)
        habit = self._update.execute(current_user_id(), dto.id, dto.changes())
        return ok({"habit": habit_to_json(habit)})

    @auth_required
    def delete_habit(self):
        self._delete.execute(current_user_id(), request.args.get("id"))
        return ok({"deleted": True})

    @auth_required
    def get_day(self):
        day, entries = self._day.execute(current_user_id(), _parse_day(request.args.get("date")))
        logs = [
            {
                "habitId": entry.habit.id,
                "habitName": entry.habit.name,
                "habitIcon": entry.habit.icon,
                "completed": bool(entry.log and entry.log.completed),
                "notes": entry.log.notes if entry.log else None,
                "source": entry.log.source.value if entry.log else None,
            }
            for entry in entries
        ]
        return ok({"date": day.isoformat(), "logs": logs})

    @auth_required
    def log_habits(self):
        dto = parse_json(HabitLogDTO)
        user_id = current_user_id()

        if dto.logs is not None:
            requests = [
                LogRequest(
                    habit_id=item.habit_id,
                    completed=item.completed,
                    notes=item.notes,
                    source=item.source,
                )
                for item in dto.logs
            ]
            results = []
            for outcome in self._log.log_many(user_id, requests, dto.log_date):
                if outcome.error:
                    results.append({"habitId": outcome.habit_id, "error": outcome.error})
                else:
                    results.append(
                        {
                            "habitId": outcome.habit_id,
                            "success": True,
                            "log": habit_log_to_json(outcome.log),
                        }
                    )
            return ok({"results": results})

        if dto.habit_id:
            log = self._log.log_one(
                user_id,
                LogRequest(
                    habit_id=dto.habit_id,
                    completed=dto.completed,
                    notes=dto.notes,
                    source=dto.source,
                ),
                dto.log_date,
            )
            return ok({"log": habit_log_to_json(log)})

        raise ValidationError("habitId or logs array required")

    @auth_required
    def interpret(self):
        dto = parse_json(InterpretDTO)
        interpretation = run_async(self._interpret.execute(current_user_id(), dto.transcript))

        data: dict[str, object] = {
            "interpretedLogs": [interpreted_log_to_json(log) for log in interpretation.logs]
        }
        if interpretation.fallback_mode:
            data["fallbackMode"] = True
        if interpretation.message:
            data["message"] = interpretation.message
        if interpretation.parse_error:
            data["rawResponse"] = interpretation.raw_response
            data["parseError"] = interpretation.parse_error
        return ok(data)
