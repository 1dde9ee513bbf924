# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint

from realityshift.application.use_cases.goals.create_goal import CreateGoalInput, CreateGoalUseCase
from realityshift.application.use_cases.goals.goal_action import GoalActionUseCase
from realityshift.application.use_cases.goals.list_goals import ListDomainsUseCase, ListGoalsUseCase
from realityshift.interfaces.http.auth import auth_required, current_user_id
from realityshift.interfaces.http.dto.base import parse_json
from realityshift.interfaces.http.dto.goals import CreateGoalDTO
from realityshift.interfaces.http.presenters import (
    challenge_to_json,
    domain_to_json,
    goal_to_json,
    ok,
)
from realityshift.shared.errors import ValidationError


class GoalsController:
    def __init__(
        self,
        *,
        list_goals_use_case: ListGoalsUseCase,
        list_domains_use_case: ListDomainsUseCase,
        create_goal_use_case: CreateGoalUseCase,
        goal_action_use_case: GoalActionUseCase,
    ) -> None:
        self._list_goals = list_goals_use_case
        self._list_domains = list_domains_use_case
        self._create_goal = create_goal_use_case
        self._goal_action = goal_action_use_case

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("goals", __name__, url_prefix="/api/goals")
        bp.add_url_rule("", view_func=self.list_goals, methods=["GET"], endpoint="goals_list")
        bp.add_url_rule("", view_func=self.create_goal, methods=["POST"], endpoint="goals_create")
        bp.add_url_rule(
            "/domains", view_func=self.list_domains, methods=["GET"], endpoint="goals_domains"
        )
        bp.add_url_rule(
            "/<goal_id>/<action>",
            view_func=self.goal_action,
            methods=["POST"],
            endpoint="goals_action",
        )
        return bp

    @auth_required
    def list_goals(self):
        goals = self._list_goals.execute(current_user_id())
        return ok({"goals": [goal_to_json(goal) for goal in goals]})

    def list_domains(self):
        domains = self._list_domains.execute()
        return ok({"domains": [domain_to_json(domain) for domain in domains]})

    @auth_required
    def create_goal(self):
        dto = parse_json(CreateGoalDTO)
        if not dto.title or not dto.title.strip() or dto.domain_id is None:
            raise ValidationError("Title and domain are required")

        result = self._create_goal.execute(
            CreateGoalInput(
                user_id=current_user_id(),
                title=dto.title.strip(),
                domain_id=dto.domain_id,
                description=dto.description,
                current_state=dto.current_state,
                desired_state=dto.desired_state,
                difficulty_level=dto.difficulty_level,
                reality_shift_enabled=dto.reality_shift_enabled,
            )
        )
        first = challenge_to_json(result.first_challenge) if result.first_challenge else None
        return ok({"goal": goal_to_json(result.goal), "firstChallenge": first})

    @auth_required
    def goal_action(self, goal_id: str, action: str):
        goal = self._goal_action.execute(current_user_id(), goal_id, action)
        return ok({"goal": goal_to_json(goal)})
