"""
cf_env.services.catalog
────────────────────────
In-memory model of the VCAP_SERVICES document: a mapping from group label
(e.g. "postgresql", "user-provided") to the bindings declared under it,
both in document order.

Parsing is fail-fast. A group whose value is not an array, or a binding
without a usable name, rejects the whole document instead of silently
dropping part of it.

Typed platform metadata is validated too: a wrongly typed optional field
(``"plan": 1``, a scalar ``tags``, a numeric ``instance_guid``) also rejects
the whole document, with the field's location in ParseError.fields. Only
``name`` is coerced from scalars; ``credentials`` accepts any JSON value.

Duplicate top-level keys collapse last-write-wins, as json.loads does; the
surviving group keeps the position of its first occurrence.

Usage:
    catalog = parse_catalog(os.environ["VCAP_SERVICES"])
    for binding in catalog.bindings():
        print(binding.label, binding.name)
"""
from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from cf_env.core.errors import ParseError
from cf_env.core.logging import get_logger

log = get_logger(__name__)


# ── Binding model ─────────────────────────────────────────────────────────────

class ServiceVolumeMount(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    container_dir: str
    device_type: str
    mode: str


class ServiceBinding(BaseModel):
    """
    One bound service instance. ``credentials`` is left untyped; use
    cf_env.services.extract.extract() to decode it into a concrete type.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    label: str = ""
    plan: str | None = None
    tags: tuple[str, ...] = ()
    credentials: Any = Field(default_factory=dict)

    # ── Platform metadata ─────────────────────────────────────────────────────
    instance_name: str | None = None
    instance_guid: str | None = None
    binding_name: str | None = None
    binding_guid: str | None = None
    provider: str | None = None
    syslog_drain_url: str | None = None
    volume_mounts: tuple[ServiceVolumeMount, ...] = ()

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator("tags", "volume_mounts", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return () if v is None else v

    @field_validator("credentials", mode="before")
    @classmethod
    def none_as_empty_credentials(cls, v: Any) -> Any:
        return {} if v is None else v

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def __repr__(self) -> str:
        # credentials omitted
        return f"ServiceBinding(name={self.name!r}, label={self.label!r}, plan={self.plan!r})"


# ── Catalog ───────────────────────────────────────────────────────────────────

class ServiceCatalog(Mapping[str, tuple[ServiceBinding, ...]]):
    """
    Read-only mapping of group label → bindings. Built once per parse and
    never shared between queries.
    """

    __slots__ = ("_groups",)

    def __init__(
        self, groups: Mapping[str, Iterable[ServiceBinding]] | None = None
    ) -> None:
        self._groups = MappingProxyType(
            {label: tuple(bindings) for label, bindings in (groups or {}).items()}
        )

    def __getitem__(self, label: str) -> tuple[ServiceBinding, ...]:
        return self._groups[label]

    def __iter__(self) -> Iterator[str]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def __repr__(self) -> str:
        sizes = ", ".join(f"{label!r}: {len(b)}" for label, b in self._groups.items())
        return f"ServiceCatalog({{{sizes}}})"

    @property
    def labels(self) -> list[str]:
        return list(self._groups)

    def bindings(self) -> Iterator[ServiceBinding]:
        """All bindings in document order: group by group, then within a group."""
        for group in self._groups.values():
            yield from group

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            label: [binding.model_dump(mode="json") for binding in group]
            for label, group in self._groups.items()
        }


# ── Parser ────────────────────────────────────────────────────────────────────

def parse_catalog(raw_json: str | bytes, source: str = "VCAP_SERVICES") -> ServiceCatalog:
    """
    Parse the raw VCAP_SERVICES text into a fully materialised catalog.
    Raises ParseError on invalid JSON or on any group/binding of the wrong shape.
    """
    try:
        document = json.loads(raw_json)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError(
            user_message=f"the json from {source!r} could not be parsed",
            detail=f"{source}: {exc}",
            source=source,
        ) from exc

    if not isinstance(document, dict):
        raise ParseError(
            user_message=f"the json from {source!r} is not an object",
            source=source,
        )

    groups: dict[str, list[ServiceBinding]] = {}
    for label, entries in document.items():
        if not isinstance(entries, list):
            raise ParseError(
                user_message=f"group {label!r} in {source!r} is not an array",
                fields={label: "expected an array of bindings"},
                source=source,
            )
        groups[label] = [
            _parse_binding(label, index, entry, source)
            for index, entry in enumerate(entries)
        ]

    catalog = ServiceCatalog(groups)
    log.debug(
        "catalog.parsed",
        source=source,
        groups=len(catalog),
        bindings=sum(len(group) for group in catalog.values()),
    )
    return catalog


def _parse_binding(label: str, index: int, entry: Any, source: str) -> ServiceBinding:
    where = f"{label}[{index}]"
    if not isinstance(entry, dict):
        raise ParseError(
            user_message=f"binding {where} in {source!r} is not an object",
            fields={where: "expected an object"},
            source=source,
        )

    data = dict(entry)
    if data.get("label") is None:
        data["label"] = label

    try:
        return ServiceBinding.model_validate(data)
    except PydanticValidationError as exc:
        fields = {
            ".".join([where, *(str(loc) for loc in err["loc"])]): err["msg"]
            for err in exc.errors()
        }
        raise ParseError(
            user_message=f"binding {where} in {source!r} has an invalid shape",
            fields=fields,
            source=source,
        ) from exc
