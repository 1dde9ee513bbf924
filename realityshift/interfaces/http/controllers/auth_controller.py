# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response

from realityshift.application.use_cases.users.demo_login import DemoLoginUseCase
from realityshift.application.use_cases.users.get_current_user import GetCurrentUserUseCase
from realityshift.application.use_cases.users.login_user import LoginUserUseCase
from realityshift.application.use_cases.users.register_user import RegisterUserUseCase
from realityshift.interfaces.http.auth import (
    auth_required,
    clear_session_cookie,
    current_claim,
    set_session_cookie,
)
from realityshift.interfaces.http.dto.auth import LoginRequestDTO, RegisterRequestDTO
from realityshift.interfaces.http.dto.base import parse_json
from realityshift.interfaces.http.presenters import ok, user_summary
from realityshift.shared.logging import logger
from realityshift.shared.middleware.rate_limit import rate_limit


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        demo_login_use_case: DemoLoginUseCase,
        current_user_use_case: GetCurrentUserUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._demo_login_use_case = demo_login_use_case
        self._current_user_use_case = current_user_use_case

    @rate_limit()
    def register(self) -> tuple[Response, int]:
        dto = parse_json(RegisterRequestDTO)
        user, token = self._register_use_case.execute(dto.email, dto.password, dto.display_name)

        response = ok(user=user_summary(user))
        set_session_cookie(response, token)
        logger.info(f"auth.register: ok user_id={user.id}")
        return response, 200

    @rate_limit()
    def login(self) -> tuple[Response, int]:
        dto = parse_json(LoginRequestDTO)
        user, token = self._login_use_case.execute(dto.email, dto.password)

        response = ok(user=user_summary(user))
        set_session_cookie(response, token)
        logger.info(f"auth.login: ok user_id={user.id}")
        return response, 200

    def demo(self) -> tuple[Response, int]:
        user, token = self._demo_login_use_case.execute()

        response = ok(user=user_summary(user), isDemo=True)
        set_session_cookie(response, token)
        logger.info(f"auth.demo: ok user_id={user.id}")
        return response, 200

    def logout(self) -> tuple[Response, int]:
        response = ok()
        clear_session_cookie(response)
        logger.info("auth.logout: ok")
        return response, 200

    @auth_required
    def me(self) -> tuple[Response, int]:
        claim = current_claim()
        user = self._current_user_use_case.execute(claim)
        summary = user_summary(user)
        summary.update(
            isDemo=claim.is_demo,
            onboardingCompleted=user.onboarding_completed,
            expiresAt=claim.expires_at.isoformat(),
        )
        return ok(user=summary), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/demo", view_func=self.demo, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/me", view_func=self.me, methods=["GET"])
        return bp
