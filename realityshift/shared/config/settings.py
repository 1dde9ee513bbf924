# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_WEAK_SESSION_SECRETS = frozenset({"", "dev", "development", "test", "changeme", "secret"})
_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _as_flag(value: str | bool | None) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def _clean_secret(value: str | None) -> str | None:
    # .env files often carry quoted keys
    if value is None:
        return None
    return value.strip().strip("\"'").strip() or None


# Sections read their own flat env names (SESSION_SECRET, OPENAI_API_KEY, ...)
_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
    validate_by_alias=True,
)


class DatabaseConfig(BaseSettings):
    model_config = _SECTION_CONFIG

    url: str = Field("sqlite:///realityshift.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")


class SecurityConfig(BaseSettings):
    """Session signing, cookie flags, CORS and login throttling."""

    model_config = _SECTION_CONFIG

    session_secret: str = Field("dev", alias="SESSION_SECRET")
    session_ttl_days: int = Field(7, ge=1, alias="SESSION_TTL_DAYS")
    bcrypt_rounds: int = Field(10, ge=4, le=31, alias="BCRYPT_ROUNDS")

    # None means "follow APP_ENV"; resolved by AppConfig
    cookie_secure: bool | None = Field(None, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Lax", alias="COOKIE_SAMESITE")
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, ge=1, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, gt=0, alias="RL_WINDOW")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _flags(cls, value: str | bool) -> bool:
        return _as_flag(value)

    @field_validator("cookie_secure", mode="before")
    @classmethod
    def _optional_flag(cls, value: str | bool | None) -> bool | None:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return _as_flag(value)

    @property
    def session_ttl_seconds(self) -> int:
        return self.session_ttl_days * 86_400


class AIConfig(BaseSettings):
    """Provider keys, model names and per-call deadlines (milliseconds)."""

    model_config = _SECTION_CONFIG

    openai_api_key: str | None = Field(None, alias="OPENAI_API_KEY")
    anthropic_api_key: str | None = Field(None, alias="ANTHROPIC_API_KEY")

    openai_base_url: str = Field("https://api.openai.com/v1", alias="OPENAI_BASE_URL")
    anthropic_base_url: str = Field("https://api.anthropic.com/v1", alias="ANTHROPIC_BASE_URL")
    anthropic_version: str = Field("2023-06-01", alias="ANTHROPIC_VERSION")

    challenge_model: str = Field("gpt-4o", alias="CHALLENGE_MODEL")
    transcription_model: str = Field("whisper-1", alias="TRANSCRIPTION_MODEL")
    speech_model: str = Field("tts-1", alias="SPEECH_MODEL")
    coach_model: str = Field("claude-3-haiku-20240307", alias="COACH_MODEL")

    default_timeout_ms: int = Field(30_000, ge=1, alias="AI_TIMEOUT_MS")
    interpretation_timeout_ms: int = Field(30_000, ge=1, alias="AI_INTERPRET_TIMEOUT_MS")
    transcription_timeout_ms: int = Field(60_000, ge=1, alias="AI_TRANSCRIBE_TIMEOUT_MS")

    @field_validator("openai_api_key", "anthropic_api_key", mode="before")
    @classmethod
    def _keys(cls, value: str | None) -> str | None:
        return _clean_secret(value)


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        validate_by_name=True,
        validate_by_alias=True,
        extra="ignore",
    )

    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    seed_reference_data: bool = Field(True, alias="SEED_REFERENCE_DATA")

    database: DatabaseConfig = Field(default_factory=lambda: DatabaseConfig())  # type: ignore[call-arg]
    security: SecurityConfig = Field(default_factory=lambda: SecurityConfig())  # type: ignore[call-arg]
    ai: AIConfig = Field(default_factory=lambda: AIConfig())  # type: ignore[call-arg]

    @field_validator("debug_logging", "seed_reference_data", mode="before")
    @classmethod
    def _flags(cls, value: str | bool) -> bool:
        return _as_flag(value)

    @model_validator(mode="after")
    def _apply_environment_defaults(self) -> "AppConfig":
        if self.security.cookie_secure is None:
            self.security.cookie_secure = self.is_production()
        if self.is_production() and self.security.session_secret in _WEAK_SESSION_SECRETS:
            raise ValueError(
                "SESSION_SECRET must be a strong random value in production "
                "(e.g. secrets.token_urlsafe(32))"
            )
        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def production_warnings(self) -> list[str]:
        """Settings that work but should be reviewed before serving real users."""
        if not self.is_production():
            return []
        checks = (
            (not self.security.cookie_secure, "COOKIE_SECURE is off; session cookies travel over plain HTTP"),
            ("*" in self.security.allowed_origins, "CORS allows any origin"),
            (not self.security.enable_hsts, "HSTS is disabled"),
            (not self.ai.openai_api_key, "OPENAI_API_KEY missing: challenges, transcription and speech disabled"),
            (not self.ai.anthropic_api_key, "ANTHROPIC_API_KEY missing: coaching uses heuristic replies"),
        )
        return [message for failed, message in checks if failed]


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = ["AIConfig", "AppConfig", "DatabaseConfig", "SecurityConfig", "load_config"]
