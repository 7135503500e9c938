"""
cf_env.services.resolver
─────────────────────────
Lookups over an already parsed ServiceCatalog.

  find_by_name   — existence assertion; first match in document order
  find_by_label  — existence assertion on the group; may be empty
  find_by_tag    — filter; no match is an empty list, not an error
"""
from __future__ import annotations

from cf_env.core.errors import NotFoundError
from cf_env.core.logging import get_logger
from cf_env.services.catalog import ServiceBinding, ServiceCatalog

log = get_logger(__name__)


def find_by_name(catalog: ServiceCatalog, name: str) -> ServiceBinding:
    """
    Return the first binding named ``name`` (case-sensitive), scanning groups
    and then bindings in document order.
    """
    for binding in catalog.bindings():
        if binding.name == name:
            log.debug("binding.resolved", by="name", name=name, label=binding.label)
            return binding
    log.warning("binding.not_found", by="name", name=name)
    raise NotFoundError(
        user_message=f"service {name!r} is not present in VCAP_SERVICES",
        name=name,
    )


def find_by_label(catalog: ServiceCatalog, label: str) -> list[ServiceBinding]:
    """Return every binding of group ``label``. An absent group raises NotFoundError."""
    if label not in catalog:
        log.warning("binding.not_found", by="label", label=label)
        raise NotFoundError(
            user_message=f"service type {label!r} is not present in VCAP_SERVICES",
            label=label,
        )
    bindings = list(catalog[label])
    log.debug("binding.resolved", by="label", label=label, count=len(bindings))
    return bindings


def find_by_tag(catalog: ServiceCatalog, tag: str) -> list[ServiceBinding]:
    """Return every binding tagged ``tag`` across all groups, in document order."""
    bindings = [binding for binding in catalog.bindings() if binding.has_tag(tag)]
    log.debug("binding.resolved", by="tag", tag=tag, count=len(bindings))
    return bindings
