"""
cf_env
──────
Stable top-level exports. Import from here, not from sub-modules directly.
Every name exported here is part of the public API and subject to semver.
"""
from cf_env.core.env import get_raw, require_raw
from cf_env.core.logging import get_logger
from cf_env.core.errors import (
    CfEnvError,
    EnvMissingError,
    EnvMalformedError,
    ParseError,
    NotFoundError,
    ExtractError,
    ShapeMismatchError,
    MalformedCredentialsError,
)
from cf_env.core.config import get_config, CfEnvConfig

from cf_env.services.catalog import (
    ServiceBinding,
    ServiceCatalog,
    ServiceVolumeMount,
    parse_catalog,
)
from cf_env.services.resolver import find_by_label, find_by_name, find_by_tag
from cf_env.services.extract import extract, extract_all
from cf_env.services.query import (
    get_binding_by_name,
    get_service_by_name,
    get_services,
    get_services_by_label,
    get_services_by_tag,
)

from cf_env.runtime.application import Application, ApplicationLimits, get_application_info
from cf_env.runtime.instance import (
    ByteUnit,
    InstanceAddress,
    Locale,
    MemoryLimit,
    get_database_url,
    get_home,
    get_instance_address,
    get_instance_guid,
    get_instance_index,
    get_instance_internal_ip,
    get_instance_ip,
    get_instance_port,
    get_lang,
    get_memory_limit,
    get_port,
    get_pwd,
    get_tmp_dir,
    get_user,
)

__version__ = "0.1.0"
__all__ = [
    # environment
    "get_raw", "require_raw",
    # logging
    "get_logger",
    # errors
    "CfEnvError", "EnvMissingError", "EnvMalformedError", "ParseError",
    "NotFoundError", "ExtractError", "ShapeMismatchError",
    "MalformedCredentialsError",
    # config
    "get_config", "CfEnvConfig",
    # catalog
    "ServiceBinding", "ServiceCatalog", "ServiceVolumeMount", "parse_catalog",
    # resolver
    "find_by_name", "find_by_label", "find_by_tag",
    # extract
    "extract", "extract_all",
    # query
    "get_services", "get_binding_by_name", "get_service_by_name",
    "get_services_by_label", "get_services_by_tag",
    # application
    "Application", "ApplicationLimits", "get_application_info",
    # instance
    "InstanceAddress", "ByteUnit", "MemoryLimit", "Locale",
    "get_instance_address", "get_instance_guid", "get_instance_index",
    "get_instance_ip", "get_instance_internal_ip", "get_instance_port",
    "get_port", "get_database_url", "get_home", "get_pwd", "get_tmp_dir",
    "get_user", "get_lang", "get_memory_limit",
]
