"""
cf_env.runtime.application
───────────────────────────
VCAP_APPLICATION: metadata about the running app (name, ids, space,
organization, routes, resource limits). Parsed into a typed model on every
call, like VCAP_SERVICES.
"""
from __future__ import annotations

import json
import uuid

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError

from cf_env.core.config import get_config
from cf_env.core.env import require_raw
from cf_env.core.errors import ParseError


class ApplicationLimits(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    disk: int | None = None
    fds: int | None = None
    mem: int | None = None


class Application(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    application_id: uuid.UUID
    application_name: str
    application_uris: list[str] = []
    application_version: uuid.UUID | None = None
    cf_api: str | None = None
    limits: ApplicationLimits = ApplicationLimits()
    name: str | None = None
    organization_id: uuid.UUID | None = None
    organization_name: str | None = None
    space_id: uuid.UUID | None = None
    space_name: str | None = None
    process_id: str | None = None
    process_type: str | None = None
    start: str | None = None
    started_at: str | None = None
    started_at_timestamp: str | None = None
    state_timestamp: str | None = None
    uris: list[str] = []
    version: uuid.UUID | None = None


def parse_application(raw_json: str | bytes, source: str = "VCAP_APPLICATION") -> Application:
    try:
        document = json.loads(raw_json)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError(
            user_message=f"the json from {source!r} could not be parsed",
            detail=f"{source}: {exc}",
            source=source,
        ) from exc

    try:
        return Application.model_validate(document)
    except PydanticValidationError as exc:
        fields = {
            ".".join(str(loc) for loc in err["loc"]) or source: err["msg"]
            for err in exc.errors()
        }
        raise ParseError(
            user_message=f"the json from {source!r} is not a valid application description",
            fields=fields,
            source=source,
        ) from exc


def get_application_info() -> Application:
    """Read and parse VCAP_APPLICATION. Raises EnvMissingError when it is unset."""
    variable = get_config().application_variable
    return parse_application(require_raw(variable), source=variable)
