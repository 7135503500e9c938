"""
cf_env.runtime.instance
────────────────────────
Typed reads of the scalar variables the platform sets on every app
instance (CF_INSTANCE_*, PORT, MEMORY_LIMIT, LANG, ...).

Every accessor raises EnvMissingError when the variable is unset and
EnvMalformedError when its text cannot be parsed.
"""
from __future__ import annotations

import re
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from ipaddress import IPv4Address, IPv6Address, ip_address
from pathlib import Path
from typing import TypeVar

from pydantic import AnyUrl, TypeAdapter

from cf_env.core.env import require_raw
from cf_env.core.errors import EnvMalformedError

T = TypeVar("T")

CF_INSTANCE_ADDR = "CF_INSTANCE_ADDR"
CF_INSTANCE_GUID = "CF_INSTANCE_GUID"
CF_INSTANCE_INDEX = "CF_INSTANCE_INDEX"
CF_INSTANCE_IP = "CF_INSTANCE_IP"
CF_INSTANCE_INTERNAL_IP = "CF_INSTANCE_INTERNAL_IP"
CF_INSTANCE_PORT = "CF_INSTANCE_PORT"
DATABASE_URL = "DATABASE_URL"
HOME = "HOME"
LANG = "LANG"
MEMORY_LIMIT = "MEMORY_LIMIT"
PORT = "PORT"
PWD = "PWD"
TMPDIR = "TMPDIR"
USER = "USER"


# ── Value types ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class InstanceAddress:
    ip: IPv4Address | IPv6Address
    port: int

    def __str__(self) -> str:
        if self.ip.version == 6:
            return f"[{self.ip}]:{self.port}"
        return f"{self.ip}:{self.port}"


class ByteUnit(Enum):
    MEGABYTE = "M"
    GIGABYTE = "G"

    @property
    def multiplier(self) -> int:
        return 1024 ** 2 if self is ByteUnit.MEGABYTE else 1024 ** 3


@dataclass(frozen=True)
class MemoryLimit:
    size: int
    unit: ByteUnit

    def to_bytes(self) -> int:
        return self.size * self.unit.multiplier

    @classmethod
    def parse(cls, text: str) -> "MemoryLimit":
        """Parse ``<size><unit>``, e.g. "512M" or "2g"."""
        if not text:
            raise ValueError("empty memory limit")
        try:
            unit = ByteUnit(text[-1].upper())
        except ValueError:
            raise ValueError(f"memory unit unknown: {text[-1]!r}") from None
        return cls(size=_parse_unsigned(text[:-1]), unit=unit)


@dataclass(frozen=True)
class Locale:
    language: str
    territory: str | None = None
    encoding: str | None = None
    modifier: str | None = None

    def __str__(self) -> str:
        text = self.language
        if self.territory:
            text += f"_{self.territory}"
        if self.encoding:
            text += f".{self.encoding}"
        if self.modifier:
            text += f"@{self.modifier}"
        return text

    @classmethod
    def parse(cls, text: str) -> "Locale":
        """Parse ``language[_territory][.encoding][@modifier]``, e.g. "en_US.UTF-8"."""
        match = _LOCALE_RE.match(text)
        if match is None:
            raise ValueError(f"not a locale: {text!r}")
        return cls(*match.groups())


_LOCALE_RE = re.compile(
    r"^([A-Za-z]{1,8})(?:_([A-Za-z]{2}|\d{3}))?(?:\.([\w-]+))?(?:@(\w+))?$"
)


# ── Parsers ───────────────────────────────────────────────────────────────────

def _parse_unsigned(text: str) -> int:
    if not text.isascii() or not text.isdigit():
        raise ValueError(f"not a non-negative integer: {text!r}")
    return int(text)


def _parse_port(text: str) -> int:
    port = _parse_unsigned(text)
    if port > 65535:
        raise ValueError(f"port out of range: {port}")
    return port


def _parse_address(text: str) -> InstanceAddress:
    host, sep, port = text.rpartition(":")
    if not sep:
        raise ValueError(f"missing port: {text!r}")
    return InstanceAddress(ip=ip_address(host.strip("[]")), port=_parse_port(port))


_url_adapter = TypeAdapter(AnyUrl)


def _read(variable: str, parse: Callable[[str], T], reason: str) -> T:
    raw = require_raw(variable)
    try:
        return parse(raw)
    except ValueError as exc:
        raise EnvMalformedError(variable, reason, detail=str(exc)) from exc


# ── Public API ────────────────────────────────────────────────────────────────

def get_instance_address() -> InstanceAddress:
    """``CF_INSTANCE_ADDR`` as ip and port."""
    return _read(CF_INSTANCE_ADDR, _parse_address, "doesn't match the format of ip:port")


def get_instance_guid() -> uuid.UUID:
    return _read(CF_INSTANCE_GUID, uuid.UUID, "isn't a valid guid")


def get_instance_index() -> int:
    return _read(CF_INSTANCE_INDEX, _parse_unsigned, "isn't a valid non-negative number")


def get_instance_ip() -> IPv4Address | IPv6Address:
    return _read(CF_INSTANCE_IP, ip_address, "isn't a valid ip address")


def get_instance_internal_ip() -> IPv4Address | IPv6Address:
    return _read(CF_INSTANCE_INTERNAL_IP, ip_address, "isn't a valid ip address")


def get_instance_port() -> int:
    return _read(CF_INSTANCE_PORT, _parse_port, "isn't a valid port number")


def get_port() -> int:
    return _read(PORT, _parse_port, "isn't a valid port number")


def get_database_url() -> AnyUrl:
    return _read(DATABASE_URL, _url_adapter.validate_python, "isn't a valid uri")


def get_home() -> Path:
    return Path(require_raw(HOME))


def get_pwd() -> Path:
    return Path(require_raw(PWD))


def get_tmp_dir() -> Path:
    return Path(require_raw(TMPDIR))


def get_user() -> str:
    return require_raw(USER)


def get_lang() -> Locale:
    return _read(LANG, Locale.parse, "isn't a valid locale")


def get_memory_limit() -> MemoryLimit:
    """``MEMORY_LIMIT`` as size and unit, e.g. "1024M"."""
    return _read(
        MEMORY_LIMIT,
        MemoryLimit.parse,
        "isn't a valid memory size formatted after '<size><unit>'",
    )
