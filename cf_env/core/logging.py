"""
cf_env.core.logging
────────────────────
Structured library logs with redaction. Credential payloads flow through
this library, so every record passes a redaction processor before output.

Loggers are wrapped per call with structlog.wrap_logger(); the host
application's structlog.configure() pipeline and its logging handlers are
left alone. The "cf_env" stdlib logger only gets a NullHandler, so records
reach whatever handlers the host installed.

Minimal stack: structlog over stdlib logging
Configure via: CF_ENV_LOG_LEVEL, CF_ENV_LOG_FORMAT=json|console
"""
from __future__ import annotations

import logging
from typing import Any

import structlog

from cf_env.core.config import get_config

logging.getLogger("cf_env").addHandler(logging.NullHandler())


# ── Level filter ──────────────────────────────────────────────────────────────

_METHOD_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "exception": logging.ERROR,
    "critical": logging.CRITICAL,
}


def _level_filter(logger: Any, method: str, event_dict: dict) -> dict:
    """Drop records below CF_ENV_LOG_LEVEL."""
    threshold = getattr(logging, get_config().log_level, logging.WARNING)
    if _METHOD_LEVELS.get(method, logging.NOTSET) < threshold:
        raise structlog.DropEvent
    return event_dict


# ── Redaction processor ───────────────────────────────────────────────────────

_REDACT_KEYS = frozenset({
    "credentials", "password", "passwd", "secret", "token", "api_key",
    "apikey", "uri", "url", "private_key", "access_token", "client_secret",
})

_REDACTED = "[REDACTED]"


def _redact_processor(
    logger: Any, method: str, event_dict: dict
) -> dict:
    """Strip sensitive fields from log records before output."""
    for key in list(event_dict.keys()):
        if key.lower() in _REDACT_KEYS:
            event_dict[key] = _REDACTED
    return event_dict


def _processors() -> list[Any]:
    if get_config().log_format == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()
    return [
        _level_filter,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _redact_processor,
        renderer,
    ]


# ── Public API ────────────────────────────────────────────────────────────────

def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Return a structured logger bound to the given stdlib logger name.

    Usage:
        log = get_logger(__name__)
        log.debug("catalog.parsed", groups=3, bindings=5)
    """
    return structlog.wrap_logger(
        logging.getLogger(name or "cf_env"),
        processors=_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
