# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, request

from realityshift.application.use_cases.coaching.coaches import (
    CreateCoachUseCase,
    DeleteCoachUseCase,
    ListCoachesUseCase,
)
from realityshift.application.use_cases.coaching.expert_chat import (
    ExpertChatUseCase,
    GetChatHistoryUseCase,
)
from realityshift.interfaces.http.auth import auth_required, current_user_id
from realityshift.interfaces.http.dto.base import parse_json
from realityshift.interfaces.http.dto.coaching import CreateCoachDTO, ExpertChatDTO
from realityshift.interfaces.http.presenters import coach_to_json, message_to_json, ok
from realityshift.utils.asyncio_utils import run_async


class CoachingController:
    def __init__(
        self,
        *,
        list_coaches_use_case: ListCoachesUseCase,
        create_coach_use_case: CreateCoachUseCase,
        delete_coach_use_case: DeleteCoachUseCase,
        history_use_case: GetChatHistoryUseCase,
        chat_use_case: ExpertChatUseCase,
    ) -> None:
        self._list_coaches = list_coaches_use_case
        self._create_coach = create_coach_use_case
        self._delete_coach = delete_coach_use_case
        self._history = history_use_case
        self._chat = chat_use_case

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("coaching", __name__, url_prefix="/api")
        bp.add_url_rule("/coaches", view_func=self.list_coaches, methods=["GET"], endpoint="coaches_list")
        bp.add_url_rule(
            "/coaches", view_func=self.create_coach, methods=["POST"], endpoint="coaches_create"
        )
        bp.add_url_rule(
            "/coaches", view_func=self.delete_coach, methods=["DELETE"], endpoint="coaches_delete"
        )
        bp.add_url_rule("/expert/chat", view_func=self.history, methods=["GET"], endpoint="expert_history")
        bp.add_url_rule("/expert/chat", view_func=self.chat, methods=["POST"], endpoint="expert_chat")
        return bp

    @auth_required
    def list_coaches(self):
        coaches = self._list_coaches.execute(current_user_id())
        return ok({"coaches": [coach_to_json(coach) for coach in coaches]})

    @auth_required
    def create_coach(self):
        dto = parse_json(CreateCoachDTO)
        coach = self._create_coach.execute(
            current_user_id(),
            dto.name,
            dto.system_prompt,
            icon=dto.icon,
            color=dto.color,
            is_goal_coach=dto.is_goal_coach,
            goal_id=dto.goal_id,
        )
        return ok({"coach": coach_to_json(coach)})

    @auth_required
    def delete_coach(self):
        self._delete_coach.execute(current_user_id(), request.args.get("id"))
        return ok({"deleted": True})

    @auth_required
    def history(self):
        messages = self._history.execute(current_user_id(), request.args.get("coachId"))
        return ok({"messages": [message_to_json(message) for message in messages]})

    @auth_required
    def chat(self):
        dto = parse_json(ExpertChatDTO)
        history = None
        if dto.history is not None:
            history = [{"role": turn.role, "content": turn.content} for turn in dto.history]
        reply = run_async(
            self._chat.execute(
                current_user_id(), dto.message, coach_id=dto.coach_id, history=history
            )
        )
        return ok({"reply": reply})
