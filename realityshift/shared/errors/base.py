# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    message: str | None = None
    context: Mapping[str, Any] | None = None
    error_type: str | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message or self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": False, "error": self.message or self.code}
        if self.error_type:
            payload["errorType"] = self.error_type
        if self.context:
            payload["details"] = dict(self.context)
        return payload


class DomainError(AppError):
    default_code = "domain_error"
    default_status = HTTPStatus.BAD_REQUEST
    default_message: str | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code or self.default_code,
            status=status or self.default_status,
            message=message or self.default_message,
            context=context,
        )


class InfrastructureError(AppError):
    def __init__(
        self,
        message: str | None = None,
        *,
        code: str = "infrastructure_error",
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
        error_type: str | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(
            code=code,
            status=resolved_status,
            message=message,
            context=context,
            error_type=error_type,
        )


class ValidationError(AppError):
    def __init__(
        self,
        message: str = "Invalid input",
        *,
        code: str = "validation_error",
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.BAD_REQUEST,
            message=message,
            context=context,
        )


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(code="unauthorized", status=HTTPStatus.UNAUTHORIZED, message=message)


class NotFoundError(AppError):
    def __init__(self, message: str = "Not found", *, resource: str | None = None) -> None:
        super().__init__(
            code="not_found",
            status=HTTPStatus.NOT_FOUND,
            message=message,
            context={"resource": resource} if resource else None,
        )


class ConflictError(AppError):
    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(code="conflict", status=HTTPStatus.CONFLICT, message=message)


class UpstreamTimeoutError(InfrastructureError):
    def __init__(self, message: str = "The upstream service timed out. Please try again.") -> None:
        super().__init__(
            message,
            code="upstream_timeout",
            status=HTTPStatus.GATEWAY_TIMEOUT,
            error_type="timeout",
        )


class UpstreamError(InfrastructureError):
    def __init__(self, message: str, *, provider: str | None = None) -> None:
        super().__init__(
            message,
            code="upstream_error",
            context={"provider": provider} if provider else None,
        )


class ConfigurationError(InfrastructureError):
    def __init__(self, missing: str) -> None:
        super().__init__(
            f"Server configuration error: {missing}",
            code="configuration_error",
        )


__all__ = [
    "AppError",
    "ConfigurationError",
    "ConflictError",
    "DomainError",
    "InfrastructureError",
    "NotFoundError",
    "UnauthorizedError",
    "UpstreamError",
    "UpstreamTimeoutError",
    "ValidationError",
]
