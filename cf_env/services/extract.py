"""
cf_env.services.extract
────────────────────────
Typed credential extraction. Decodes a binding's untyped ``credentials``
payload into any type pydantic can validate: BaseModel subclasses,
dataclasses, TypedDicts, builtin generics. ``Any`` returns the raw JSON value.

Validation runs on a deep copy, so nothing returned aliases the binding's
own payload.

Raises cf_env errors (not raw pydantic errors):
  ShapeMismatchError         — structured data, wrong structure for the type
  MalformedCredentialsError  — the payload is not structured data at all

Usage:
    class PostgresCredentials(BaseModel):
        uri: str

    creds = extract(binding, PostgresCredentials)
    creds.uri
"""
from __future__ import annotations

import copy
from collections.abc import Iterable
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from cf_env.core.errors import MalformedCredentialsError, ShapeMismatchError
from cf_env.core.logging import get_logger
from cf_env.services.catalog import ServiceBinding

log = get_logger(__name__)

T = TypeVar("T")

_MALFORMED_ERROR_TYPES = frozenset({"json_invalid", "json_type"})


def extract(binding: ServiceBinding, model: type[T] | Any = Any) -> T:
    """Decode ``binding.credentials`` into ``model``."""
    return _validate(binding, TypeAdapter(model), model)


def extract_all(bindings: Iterable[ServiceBinding], model: type[T] | Any = Any) -> list[T]:
    """Decode every binding's credentials; stops at the first failure."""
    adapter = TypeAdapter(model)
    return [_validate(binding, adapter, model) for binding in bindings]


def _validate(binding: ServiceBinding, adapter: TypeAdapter, model: Any) -> Any:
    credentials = binding.credentials
    if not _is_structured(credentials):
        log.warning("credentials.malformed", binding=binding.name)
        raise MalformedCredentialsError(
            user_message=f"credentials of {binding.name!r} are not structured data",
            binding=binding.name,
        )

    try:
        return adapter.validate_python(copy.deepcopy(credentials))
    except PydanticValidationError as exc:
        errors = exc.errors()
        fields = {
            ".".join(str(loc) for loc in err["loc"]) or "credentials": err["msg"]
            for err in errors
        }
        if any(err["type"] in _MALFORMED_ERROR_TYPES for err in errors):
            error_cls = MalformedCredentialsError
        else:
            error_cls = ShapeMismatchError
        log.warning(
            "credentials.extract_failed",
            binding=binding.name,
            code=error_cls.code,
            fields=sorted(fields),
        )
        raise error_cls(
            user_message=f"credentials of {binding.name!r} do not match {_type_name(model)}",
            fields=fields,
            binding=binding.name,
        ) from exc


def _is_structured(value: Any) -> bool:
    """True when ``value`` is made only of JSON-native types."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return True
    if isinstance(value, dict):
        return all(
            isinstance(key, str) and _is_structured(item)
            for key, item in value.items()
        )
    if isinstance(value, (list, tuple)):
        return all(_is_structured(item) for item in value)
    return False


def _type_name(model: Any) -> str:
    return getattr(model, "__name__", repr(model))
