"""Enums for DNS configuration module.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

from enum import StrEnum


class DNSRecordType(StrEnum):
    """Supported zone file record types."""

    A = "A"
    AAAA = "AAAA"
    CNAME = "CNAME"
    MX = "MX"
    TXT = "TXT"
    NS = "NS"
    PTR = "PTR"
    SRV = "SRV"


class DNSZoneType(StrEnum):
    """BIND zone types."""

    MASTER = "master"
    SLAVE = "slave"
    FORWARD = "forward"


class DNSServiceState(StrEnum):
    """`systemctl is-active` answers we care about."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    FAILED = "failed"
    UNKNOWN = "unknown"
