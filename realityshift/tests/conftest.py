from __future__ import annotations

import os
import tempfile
from collections.abc import Callable
from typing import Any

import pytest

os.environ.setdefault(
    "LOG_FILE", os.path.join(tempfile.mkdtemp(prefix="realityshift-logs-"), "app.log")
)

from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from realityshift.app import create_app  # noqa: E402
from realityshift.shared.config import AIConfig, AppConfig, DatabaseConfig, SecurityConfig  # noqa: E402


def build_config(*, app_env: str = "development", **security: Any) -> AppConfig:
    options: dict[str, Any] = {
        "session_secret": "test-secret-value",
        "bcrypt_rounds": 4,
        "enable_rate_limit": False,
    }
    options.update(security)
    return AppConfig(
        app_env=app_env,
        database=DatabaseConfig(url="sqlite://"),
        security=SecurityConfig(**options),
        ai=AIConfig(openai_api_key=None, anthropic_api_key=None),
    )


@pytest.fixture()
def app_factory() -> Callable[..., Flask]:
    def factory(*, app_env: str = "development", **security: Any) -> Flask:
        app = create_app(build_config(app_env=app_env, **security))
        app.config.update(TESTING=True)
        return app

    return factory


@pytest.fixture()
def app(app_factory: Callable[..., Flask]) -> Flask:
    return app_factory()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def signed_in(client: FlaskClient) -> FlaskClient:
    response = client.post(
        "/api/auth/register",
        json={"email": "alice@example.com", "password": "secret123", "displayName": "Alice"},
    )
    assert response.status_code == 200
    return client
