# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint

from realityshift.application.use_cases.users.preferences import (
    GetPreferencesUseCase,
    SavePreferencesUseCase,
)
from realityshift.interfaces.http.auth import auth_required, current_user_id
from realityshift.interfaces.http.dto.base import parse_json
from realityshift.interfaces.http.dto.settings import PreferencesDTO
from realityshift.interfaces.http.presenters import ok, preferences_to_json
from realityshift.shared.logging import logger


class SettingsController:
    def __init__(
        self,
        *,
        get_use_case: GetPreferencesUseCase,
        save_use_case: SavePreferencesUseCase,
    ) -> None:
        self._get = get_use_case
        self._save = save_use_case

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("settings", __name__, url_prefix="/api")
        bp.add_url_rule(
            "/settings",
            view_func=self.get_settings,
            methods=["GET"],
            endpoint="settings_get",
        )
        bp.add_url_rule(
            "/settings",
            view_func=self.update_settings,
            methods=["POST"],
            endpoint="settings_set",
        )
        return bp

    @auth_required
    def get_settings(self):
        prefs = self._get.execute(current_user_id())
        return ok({"preferences": preferences_to_json(prefs)})

    @auth_required
    def update_settings(self):
        dto = parse_json(PreferencesDTO)
        changes = dto.changes()
        prefs = self._save.execute(current_user_id(), changes)
        logger.info(f"settings.update: fields={sorted(changes)}")
        return ok({"preferences": preferences_to_json(prefs)})
