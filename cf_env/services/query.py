"""
cf_env.services.query
──────────────────────
Public query API over VCAP_SERVICES. Each call reads the variable and
parses it again; there is no process-wide catalog to go stale.

Pipeline: environment → parse → lookup → extract. The first failing stage
raises, and the error's ``stage`` attribute says which one it was.

Usage:
    class RedisCredentials(BaseModel):
        host: str
        port: int
        password: str

    creds = get_service_by_name("cache", RedisCredentials)
    raw = get_service_by_name("cache")          # untyped JSON value
"""
from __future__ import annotations

from typing import Any, TypeVar

from cf_env.core.config import get_config
from cf_env.core.env import require_raw
from cf_env.services.catalog import ServiceBinding, ServiceCatalog, parse_catalog
from cf_env.services.extract import extract, extract_all
from cf_env.services.resolver import find_by_label, find_by_name, find_by_tag

T = TypeVar("T")


def get_services() -> ServiceCatalog:
    """
    Read and parse VCAP_SERVICES. Raises EnvMissingError when it is unset,
    before any parsing is attempted.
    """
    variable = get_config().services_variable
    return parse_catalog(require_raw(variable), source=variable)


def get_binding_by_name(name: str) -> ServiceBinding:
    """Return the whole binding (metadata and untyped credentials) named ``name``."""
    return find_by_name(get_services(), name)


def get_service_by_name(name: str, model: type[T] | Any = Any) -> T:
    """Return the credentials of the binding named ``name``, decoded into ``model``."""
    return extract(get_binding_by_name(name), model)


def get_services_by_label(label: str, model: type[T] | Any = Any) -> list[T]:
    """Return the credentials of every binding in group ``label``, decoded into ``model``."""
    return extract_all(find_by_label(get_services(), label), model)


def get_services_by_tag(tag: str, model: type[T] | Any = Any) -> list[T]:
    """Return the credentials of every binding tagged ``tag``, decoded into ``model``."""
    return extract_all(find_by_tag(get_services(), tag), model)
