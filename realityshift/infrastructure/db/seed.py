# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Idempotent loading of goal domains and challenge templates."""

from __future__ import annotations

import json
from importlib import resources
from typing import Any

from realityshift.infrastructure.db.models import ChallengeTemplate, GoalDomain
from realityshift.infrastructure.db.session import Database
from realityshift.shared.logging import logger


def load_reference_data() -> dict[str, list[dict[str, Any]]]:
    raw = resources.files("realityshift.infrastructure.db").joinpath("reference_data.json").read_text(
        encoding="utf-8"
    )
    return json.loads(raw)


def seed_reference_data(database: Database) -> None:
    data = load_reference_data()
    with database.session_scope() as session:
        for row in data["domains"]:
            session.merge(GoalDomain(**row))
        session.flush()
        for row in data["templates"]:
            session.merge(ChallengeTemplate(**row))
    logger.info(
        f"seed: ensured {len(data['domains'])} domains and {len(data['templates'])} templates"
    )


__all__ = ["load_reference_data", "seed_reference_data"]
