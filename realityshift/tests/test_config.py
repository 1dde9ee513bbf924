from __future__ import annotations

import pytest

from realityshift.shared.config import AppConfig

CONFIG_ENV = (
    "APP_ENV",
    "DATABASE_URL",
    "SESSION_SECRET",
    "COOKIE_SECURE",
    "ALLOWED_ORIGINS",
    "ENABLE_RATE_LIMIT",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> pytest.MonkeyPatch:
    for name in CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)
    # keep a stray .env in the working directory out of the picture
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def test_flat_env_names_reach_every_section(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("SESSION_SECRET", "a-real-strong-secret")
    clean_env.setenv("OPENAI_API_KEY", '"sk-test"')
    clean_env.setenv("ANTHROPIC_API_KEY", "sk-ant-test")
    clean_env.setenv("DATABASE_URL", "postgresql://db/app")
    clean_env.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
    clean_env.setenv("ENABLE_RATE_LIMIT", "no")

    config = AppConfig()

    assert config.security.session_secret == "a-real-strong-secret"
    assert config.ai.openai_api_key == "sk-test"
    assert config.ai.anthropic_api_key == "sk-ant-test"
    assert config.database.url == "postgresql://db/app"
    assert config.security.allowed_origins == ["https://a.example", "https://b.example"]
    assert config.security.enable_rate_limit is False
    assert config.security.cookie_secure is False


def test_defaults_without_env() -> None:
    config = AppConfig()

    assert config.app_env == "development"
    assert config.security.session_secret == "dev"
    assert config.ai.openai_api_key is None
    assert config.database.url == "sqlite:///realityshift.db"


def test_production_accepts_strong_secret_and_secures_cookie(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("APP_ENV", "production")
    clean_env.setenv("SESSION_SECRET", "a-real-strong-secret")

    config = AppConfig()

    assert config.is_production()
    assert config.security.cookie_secure is True
    assert "HSTS is disabled" in config.production_warnings()


def test_production_respects_explicit_cookie_flag(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("APP_ENV", "production")
    clean_env.setenv("SESSION_SECRET", "a-real-strong-secret")
    clean_env.setenv("COOKIE_SECURE", "false")

    config = AppConfig()

    assert config.security.cookie_secure is False


def test_production_refuses_default_secret(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("APP_ENV", "production")

    with pytest.raises(ValueError, match="SESSION_SECRET"):
        AppConfig()
