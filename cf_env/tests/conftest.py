"""
cf_env test configuration.

Every test starts from an environment without any platform variables, so
results never depend on the machine running pytest.
"""
from __future__ import annotations

import json

import pytest

_PLATFORM_VARIABLES = (
    "VCAP_SERVICES",
    "VCAP_APPLICATION",
    "CF_ENV_SERVICES_VARIABLE",
    "CF_ENV_APPLICATION_VARIABLE",
    "CF_INSTANCE_ADDR",
    "CF_INSTANCE_GUID",
    "CF_INSTANCE_INDEX",
    "CF_INSTANCE_IP",
    "CF_INSTANCE_INTERNAL_IP",
    "CF_INSTANCE_PORT",
    "DATABASE_URL",
    "LANG",
    "MEMORY_LIMIT",
    "PORT",
)


# ── Fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Unset platform variables and reset cached settings around each test."""
    from cf_env.core.config import _reset_config

    for name in _PLATFORM_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    _reset_config()
    yield
    _reset_config()


@pytest.fixture
def vcap_document():
    """A VCAP_SERVICES document with three groups, one of them empty."""
    return {
        "postgresql": [
            {
                "name": "db1",
                "label": "postgresql",
                "plan": "small",
                "tags": ["relational", "sql"],
                "credentials": {"uri": "postgres://u:p@h:5432/d"},
            },
            {
                "name": "db2",
                "label": "postgresql",
                "plan": "large",
                "tags": ["relational"],
                "credentials": {"uri": "postgres://u:p@h2:5432/d2"},
            },
        ],
        "redis": [
            {
                "name": "cache",
                "label": "redis",
                "tags": ["key-value"],
                "credentials": {"host": "r", "port": 6379, "password": "pw"},
            },
        ],
        "user-provided": [],
    }


@pytest.fixture
def vcap_services(monkeypatch, vcap_document):
    """Set VCAP_SERVICES from ``vcap_document`` and return the raw text."""
    raw = json.dumps(vcap_document)
    monkeypatch.setenv("VCAP_SERVICES", raw)
    return raw
