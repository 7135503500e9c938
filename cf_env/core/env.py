"""
cf_env.core.env
────────────────
Raw reads of the process environment. Absence is a normal outcome here:
get_raw() returns None, and only require_raw() turns it into an error.
"""
from __future__ import annotations

import os

from cf_env.core.errors import EnvMissingError


def get_raw(key: str) -> str | None:
    """Return the text of ``key``, or None when it is unset."""
    return os.environ.get(key)


def require_raw(key: str) -> str:
    """Return the text of ``key``. Raises EnvMissingError when it is unset."""
    value = get_raw(key)
    if value is None:
        raise EnvMissingError(key)
    return value
