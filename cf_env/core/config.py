"""
cf_env.core.config
───────────────────
Typed settings for the library itself. Reads from .env → environment
variables. All fields are typed via Pydantic.

Only these settings are cached. The service catalog never is: every query
re-reads and re-parses VCAP_SERVICES.

Minimal stack: pydantic-settings + python-dotenv (.env support)
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CfEnvConfig(BaseSettings):
    """
    Library settings. All env vars are prefixed with CF_ENV_.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Sources ───────────────────────────────────────────────────────────────
    services_variable: str = Field(
        default="VCAP_SERVICES", alias="CF_ENV_SERVICES_VARIABLE"
    )
    application_variable: str = Field(
        default="VCAP_APPLICATION", alias="CF_ENV_APPLICATION_VARIABLE"
    )

    # ── Logging ───────────────────────────────────────────────────────────────
    log_level: str = Field(default="WARNING", alias="CF_ENV_LOG_LEVEL")
    log_format: str = Field(default="json", alias="CF_ENV_LOG_FORMAT")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        allowed = {"json", "console"}
        if v.lower() not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got {v!r}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache(maxsize=1)
def get_config() -> CfEnvConfig:
    """
    Return the settings singleton. Cached after first call.
    Call _reset_config() in tests to pick up new env vars.
    """
    return CfEnvConfig()


def _reset_config() -> None:
    """For tests — clear the config cache."""
    get_config.cache_clear()
