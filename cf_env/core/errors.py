"""
cf_env.core.errors
───────────────────
Error taxonomy for every stage of a lookup. Each error has a stable code
and the stage it was raised from, so callers can tell "service not bound"
(NotFoundError, check the deployment) from "service bound but credentials
shape unexpected" (ExtractError, check the credential type).

Stages: environment → parse → lookup → extract
"""
from __future__ import annotations

from typing import Any


# ── Base error ────────────────────────────────────────────────────────────────

class CfEnvError(Exception):
    """
    Base class for all cf_env errors. Every error has:
    - code: stable machine-readable string (snake_case)
    - stage: which step of the lookup raised it
    - user_message: safe to surface (never contains credential values)
    - detail: internal context
    """

    code: str = "cf_env_error"
    stage: str = "unknown"

    def __init__(
        self,
        code: str | None = None,
        user_message: str = "Could not read the platform environment.",
        detail: str | None = None,
        **metadata: Any,
    ) -> None:
        self.code = code or self.__class__.code
        self.user_message = user_message
        self.detail = detail or user_message
        self.metadata = metadata
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "stage": self.stage,
                "message": self.user_message,
            }
        }


# ── Environment stage ─────────────────────────────────────────────────────────

class EnvMissingError(CfEnvError):
    """A required environment variable is not set."""
    code = "env_missing"
    stage = "environment"

    def __init__(self, variable: str, **metadata: Any) -> None:
        self.variable = variable
        super().__init__(
            user_message=f"environment variable {variable!r} is not set",
            variable=variable,
            **metadata,
        )


class EnvMalformedError(CfEnvError):
    """An environment variable is set but its text is not the expected form."""
    code = "env_malformed"
    stage = "environment"

    def __init__(self, variable: str, reason: str, **metadata: Any) -> None:
        self.variable = variable
        self.reason = reason
        super().__init__(
            user_message=f"environment variable {variable!r} is malformed: {reason}",
            variable=variable,
            **metadata,
        )


# ── Parse stage ───────────────────────────────────────────────────────────────

class ParseError(CfEnvError):
    """The JSON document is invalid or does not have the expected shape."""
    code = "malformed"
    stage = "parse"

    def __init__(
        self,
        code: str | None = None,
        user_message: str = "the JSON document could not be parsed",
        fields: dict | None = None,
        **metadata: Any,
    ) -> None:
        self.fields = fields or {}
        super().__init__(code, user_message, **metadata)

    def to_dict(self) -> dict:
        d = super().to_dict()
        if self.fields:
            d["error"]["fields"] = self.fields
        return d


# ── Lookup stage ──────────────────────────────────────────────────────────────

class NotFoundError(CfEnvError):
    """No binding matches a by-name or by-label lookup."""
    code = "not_found"
    stage = "lookup"


# ── Extract stage ─────────────────────────────────────────────────────────────

class ExtractError(CfEnvError):
    """Credentials are present but cannot be turned into the requested type."""
    code = "extract_error"
    stage = "extract"

    def __init__(
        self,
        code: str | None = None,
        user_message: str = "credentials could not be extracted",
        fields: dict | None = None,
        **metadata: Any,
    ) -> None:
        self.fields = fields or {}
        super().__init__(code, user_message, **metadata)

    def to_dict(self) -> dict:
        d = super().to_dict()
        if self.fields:
            d["error"]["fields"] = self.fields
        return d


class ShapeMismatchError(ExtractError):
    """Credentials are structured data, but not the structure the target type needs."""
    code = "shape_mismatch"


class MalformedCredentialsError(ExtractError):
    """Credentials are not structured JSON data at all."""
    code = "credentials_malformed"


__all__ = [
    "CfEnvError",
    "EnvMissingError",
    "EnvMalformedError",
    "ParseError",
    "NotFoundError",
    "ExtractError",
    "ShapeMismatchError",
    "MalformedCredentialsError",
]
