# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, request

from realityshift.application.use_cases.challenges.accept_template import AcceptTemplateUseCase
from realityshift.application.use_cases.challenges.complete_challenge import (
    CompleteChallengeUseCase,
    SkipChallengeUseCase,
)
from realityshift.application.use_cases.challenges.generate_challenge import (
    GenerateChallengeUseCase,
)
from realityshift.application.use_cases.challenges.list_challenges import (
    ListChallengesUseCase,
    ListTemplatesUseCase,
)
from realityshift.domain.goals.entities import DifficultyBand
from realityshift.interfaces.http.auth import auth_required, current_user_id
from realityshift.interfaces.http.dto.base import parse_json
from realityshift.interfaces.http.dto.goals import (
    AcceptTemplateDTO,
    CompleteChallengeDTO,
    GenerateChallengeDTO,
    SkipChallengeDTO,
)
from realityshift.interfaces.http.presenters import (
    challenge_log_to_json,
    challenge_to_json,
    ok,
    template_to_json,
)
from realityshift.shared.errors import ValidationError
from realityshift.utils.asyncio_utils import run_async


def _parse_band(raw: str | None) -> DifficultyBand:
    try:
        return DifficultyBand((raw or "all").lower())
    except ValueError:
        raise ValidationError("Invalid difficulty") from None


def _parse_domain_id(raw: str | None) -> int | None:
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError("Invalid domainId") from None


class ChallengesController:
    def __init__(
        self,
        *,
        list_use_case: ListChallengesUseCase,
        templates_use_case: ListTemplatesUseCase,
        generate_use_case: GenerateChallengeUseCase,
        complete_use_case: CompleteChallengeUseCase,
        skip_use_case: SkipChallengeUseCase,
        accept_use_case: AcceptTemplateUseCase,
    ) -> None:
        self._list = list_use_case
        self._templates = templates_use_case
        self._generate = generate_use_case
        self._complete = complete_use_case
        self._skip = skip_use_case
        self._accept = accept_use_case

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("challenges", __name__, url_prefix="/api/challenges")
        bp.add_url_rule("", view_func=self.list_challenges, methods=["GET"], endpoint="challenges_list")
        bp.add_url_rule(
            "/generate", view_func=self.generate, methods=["POST"], endpoint="challenges_generate"
        )
        bp.add_url_rule(
            "/templates", view_func=self.templates, methods=["GET"], endpoint="challenges_templates"
        )
        bp.add_url_rule("/accept", view_func=self.accept, methods=["POST"], endpoint="challenges_accept")
        bp.add_url_rule(
            "/<challenge_id>/complete",
            view_func=self.complete,
            methods=["POST"],
            endpoint="challenges_complete",
        )
        bp.add_url_rule(
            "/<challenge_id>/skip", view_func=self.skip, methods=["POST"], endpoint="challenges_skip"
        )
        return bp

    @auth_required
    def list_challenges(self):
        overview = self._list.execute(current_user_id())
        return ok(
            {
                "today": [challenge_to_json(c) for c in overview.today],
                "recent": [challenge_to_json(c) for c in overview.recent],
                "streak": overview.streak,
            }
        )

    @auth_required
    def generate(self):
        dto = parse_json(GenerateChallengeDTO)
        if not dto.goal_id:
            raise ValidationError("Goal ID is required")
        challenge = run_async(self._generate.execute(current_user_id(), dto.goal_id))
        return ok({"challenge": challenge_to_json(challenge)})

    def templates(self):
        templates = self._templates.execute(
            domain_id=_parse_domain_id(request.args.get("domainId")),
            band=_parse_band(request.args.get("difficulty")),
        )
        return ok({"templates": [template_to_json(t) for t in templates]})

    @auth_required
    def accept(self):
        dto = parse_json(AcceptTemplateDTO)
        if not dto.template_id:
            raise ValidationError("Template ID is required")
        challenge = self._accept.execute(current_user_id(), dto.template_id, dto.scheduled_date)
        return ok({"challenge": challenge_to_json(challenge)})

    @auth_required
    def complete(self, challenge_id: str):
        dto = parse_json(CompleteChallengeDTO)
        result = self._complete.execute(
            current_user_id(),
            challenge_id,
            difficulty_felt=dto.difficulty_felt,
            satisfaction=dto.satisfaction,
            notes=dto.notes,
        )
        return ok(
            {
                "challenge": challenge_to_json(result.challenge),
                "log": challenge_log_to_json(result.log),
                "streakCount": result.streak_count,
                "streakUpdated": True,
            }
        )

    @auth_required
    def skip(self, challenge_id: str):
        dto = parse_json(SkipChallengeDTO)
        challenge = self._skip.execute(current_user_id(), challenge_id, dto.reason)
        return ok({"challenge": challenge_to_json(challenge)})
