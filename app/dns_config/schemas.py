"""Schemas for DNS configuration.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

import re
from ipaddress import IPv6Address
from typing import Annotated

import dns.exception
import dns.name
from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .enums import DNSRecordType, DNSZoneType

_IPV4_RE = re.compile(r"(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})", re.ASCII)
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
_ZONE_NAME_RE = re.compile(r"[A-Za-z0-9_-]+(\.[A-Za-z0-9_-]+)*\.?", re.ASCII)
_OWNER_NAME_RE = re.compile(r"[A-Za-z0-9_*@.-]+", re.ASCII)
_MAILBOX_RE = re.compile(r"[A-Za-z0-9_.+@-]+", re.ASCII)

# Characters closing BIND strings, statements and blocks.
_STATEMENT_CHARS = frozenset(';{}"')

_HOSTNAME_VALUE_TYPES = frozenset(
    {
        DNSRecordType.CNAME,
        DNSRecordType.MX,
        DNSRecordType.NS,
        DNSRecordType.PTR,
        DNSRecordType.SRV,
    },
)


def parse_string_list(value: object) -> object:
    """Split `"a; b; c;"` into `["a", "b", "c"]`, pass lists through."""
    if value is None:
        return []

    if isinstance(value, str):
        value = value.split(";")

    if isinstance(value, (list, tuple)):
        return [
            item.strip() if isinstance(item, str) else item
            for item in value
            if not (isinstance(item, str) and not item.strip())
        ]

    return value


def is_valid_ipv4(value: str) -> bool:
    """Check dotted quad with every octet in 0..255."""
    match = _IPV4_RE.fullmatch(value)
    if match is None:
        return False
    return all(0 <= int(octet) <= 255 for octet in match.groups())


def has_control_chars(value: str) -> bool:
    """Check for line breaks, tabs and other control characters."""
    return _CONTROL_CHARS_RE.search(value) is not None


def _check_ipv4_items(items: list[str]) -> list[str]:
    for item in items:
        if not is_valid_ipv4(item):
            raise ValueError(f"Invalid IPv4 address in list: {item}")
    return items


def _check_acl_items(items: list[str]) -> list[str]:
    """Address match list elements can not leave their BIND block."""
    for item in items:
        if has_control_chars(item) or _STATEMENT_CHARS.intersection(item):
            raise ValueError(f"Invalid address match list element: {item!r}")
    return items


StringList = Annotated[
    list[str],
    BeforeValidator(parse_string_list),
    AfterValidator(_check_acl_items),
]


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("*")
    @classmethod
    def reject_control_chars(cls, value: object) -> object:
        """Text fields are single line, zone files are line based."""
        if isinstance(value, str) and has_control_chars(value):
            raise ValueError(
                f"Control characters are not allowed: {value!r}",
            )
        return value


class DNSRecordSchema(_CamelModel):
    """Single resource record of a zone.

    MX and SRV helper fields are decimal strings, an empty string means
    the field is absent. Missing helper fields do not fail validation,
    such records are dropped by the renderer with a diagnostic.
    """

    id: str | None = None
    type: DNSRecordType
    name: str = "@"
    value: str
    priority: str | None = None
    weight: str | None = None
    port: str | None = None
    ttl: int | None = Field(default=None, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def default_apex(cls, name: str | None) -> str:
        """Treat empty owner name as zone apex."""
        if name is None or not str(name).strip():
            return "@"
        return str(name).strip()

    @field_validator("name")
    @classmethod
    def check_owner_name(cls, name: str) -> str:
        """Owner name is `@`, a wildcard or plain labels."""
        if not _OWNER_NAME_RE.fullmatch(name):
            raise ValueError(f"Invalid record name {name!r}")
        return name

    @field_validator("priority", "weight", "port", mode="before")
    @classmethod
    def stringify_numbers(cls, value: object) -> str | None:
        """Accept ints from API clients, keep decimal strings."""
        if value is None:
            return None
        return str(value).strip()

    @model_validator(mode="after")
    def check_value(self) -> "DNSRecordSchema":
        """Validate addresses of A and AAAA records and record targets."""
        if self.type == DNSRecordType.A and not is_valid_ipv4(self.value):
            raise ValueError(
                f"A record {self.name} must be a valid IPv4 address, "
                f"got {self.value!r}",
            )

        if self.type == DNSRecordType.AAAA:
            try:
                IPv6Address(self.value)
            except ValueError as err:
                raise ValueError(
                    f"AAAA record {self.name} must be a valid IPv6 "
                    f"address, got {self.value!r}",
                ) from err

        if (
            self.type in _HOSTNAME_VALUE_TYPES
            and not _OWNER_NAME_RE.fullmatch(self.value)
        ):
            raise ValueError(
                f"{self.type} record {self.name} must point to a host "
                f"name, got {self.value!r}",
            )

        return self


class SOASettingsSchema(_CamelModel):
    """Zone authority parameters, numbers are carried as strings."""

    ttl: str | None = None
    primary_nameserver: str | None = None
    admin_email: str | None = None
    serial: str | None = None
    refresh: str | None = None
    retry: str | None = None
    expire: str | None = None
    minimum_ttl: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def stringify(cls, value: object) -> str | None:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("primary_nameserver")
    @classmethod
    def check_nameserver(cls, value: str | None) -> str | None:
        if value is not None and not _ZONE_NAME_RE.fullmatch(value):
            raise ValueError(f"Invalid primary nameserver {value!r}")
        return value

    @field_validator("admin_email")
    @classmethod
    def check_admin_email(cls, value: str | None) -> str | None:
        if value is not None and not _MAILBOX_RE.fullmatch(value):
            raise ValueError(f"Invalid admin email {value!r}")
        return value


class ZoneDefinitionSchema(_CamelModel):
    """Zone as declared in the zone definitions file."""

    id: str | None = None
    zone_name: str = Field(min_length=1)
    zone_type: DNSZoneType = DNSZoneType.MASTER
    file_name: str = Field(min_length=1)
    allow_update: StringList = Field(default_factory=lambda: ["none"])

    @field_validator("zone_name")
    @classmethod
    def check_zone_name(cls, zone_name: str) -> str:
        """Zone name must be a domain name made of plain ASCII labels."""
        zone_name = zone_name.strip()
        if not _ZONE_NAME_RE.fullmatch(zone_name):
            raise ValueError(f"Invalid zone name {zone_name!r}")

        try:
            dns.name.from_text(zone_name)
        except dns.exception.DNSException as err:
            raise ValueError(
                f"Invalid zone name {zone_name!r}: {err}",
            ) from err
        return zone_name

    @field_validator("file_name")
    @classmethod
    def check_file_name(cls, file_name: str) -> str:
        """Zone file must stay inside zones directory."""
        file_name = file_name.strip()
        if (
            "/" in file_name
            or "\\" in file_name
            or file_name in {".", ".."}
            or _STATEMENT_CHARS.intersection(file_name)
            or any(char.isspace() for char in file_name)
        ):
            raise ValueError(
                f"Zone file name must be a plain file name: {file_name!r}",
            )
        return file_name


class ZoneSchema(ZoneDefinitionSchema):
    """DNS zone."""

    soa_settings: SOASettingsSchema = Field(
        default_factory=SOASettingsSchema,
    )
    records: list[DNSRecordSchema] = Field(default_factory=list)


class ZoneDefinitionsSchema(_CamelModel):
    """Zones declared in the zone definitions file."""

    zones: list[ZoneDefinitionSchema] = Field(default_factory=list)


class DNSOptionsSchema(_CamelModel):
    """Global server options."""

    dns_server_status: bool = False
    listen_on: StringList = Field(default_factory=list)
    allow_query: StringList = Field(default_factory=list)
    allow_recursion: StringList = Field(default_factory=list)
    forwarders: StringList = Field(default_factory=list)
    allow_transfer: StringList = Field(default_factory=list)
    dnssec_validation: bool = True
    query_logging: bool = False

    @field_validator("listen_on", "forwarders")
    @classmethod
    def check_addresses(cls, items: list[str]) -> list[str]:
        """Listen and forwarder lists hold plain IPv4 addresses."""
        return _check_ipv4_items(items)


class DNSConfigurationSchema(DNSOptionsSchema):
    """Full BIND configuration, replaces the previous one on apply."""

    zones: list[ZoneSchema] = Field(min_length=1)

    @model_validator(mode="after")
    def check_unique_files(self) -> "DNSConfigurationSchema":
        """Two zones can not share one zone file."""
        seen: set[str] = set()
        for zone in self.zones:
            if zone.file_name in seen:
                raise ValueError(
                    f"Zone file {zone.file_name!r} is used more than once",
                )
            seen.add(zone.file_name)
        return self
