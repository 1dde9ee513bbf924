# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, TypeVar

from flask import request
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from realityshift.shared.errors.validation import raise_validation_error

M = TypeVar("M", bound="CamelModel")


class CamelModel(BaseModel):
    """Request body with camelCase keys on the wire and snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        validate_by_name=True,
        validate_by_alias=True,
        extra="ignore",
    )


def parse_json(model: type[M], payload: Any = None) -> M:
    if payload is None:
        payload = request.get_json(silent=True) or {}
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise_validation_error(exc)


__all__ = ["CamelModel", "parse_json"]
