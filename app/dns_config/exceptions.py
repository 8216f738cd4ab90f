"""DNS configuration exceptions.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

from enum import IntEnum, unique

from errors import BaseDomainException


@unique
class ErrorCodes(IntEnum):
    """Error codes."""

    BASE_ERROR = 0
    DNS_CONFIG_VALIDATION_ERROR = 1
    DNS_PERMISSION_ERROR = 2
    DNS_WRITE_ERROR = 3
    DNS_CHECK_ERROR = 4
    DNS_RELOAD_ERROR = 5
    DNS_NOT_IMPLEMENTED_ERROR = 6
    DNS_INTERNAL_ERROR = 7


class DNSConfigError(BaseDomainException):
    """DNS configuration error."""

    code: ErrorCodes = ErrorCodes.BASE_ERROR


class DNSConfigValidationError(DNSConfigError):
    """Configuration payload is malformed, nothing was touched."""

    code = ErrorCodes.DNS_CONFIG_VALIDATION_ERROR


class DNSPermissionError(DNSConfigError):
    """Production directories are not writable, nothing was touched."""

    code = ErrorCodes.DNS_PERMISSION_ERROR


class DNSWriteError(DNSConfigError):
    """Artifact write failed in the middle of an update."""

    code = ErrorCodes.DNS_WRITE_ERROR


class DNSCheckError(DNSConfigError):
    """External checker rejected generated configuration."""

    code = ErrorCodes.DNS_CHECK_ERROR


class DNSReloadError(DNSConfigError):
    """Configuration was persisted but the service was not reloaded."""

    code = ErrorCodes.DNS_RELOAD_ERROR


class DNSConfigNotImplementedError(DNSConfigError):
    """DNS configuration feature is not implemented."""

    code = ErrorCodes.DNS_NOT_IMPLEMENTED_ERROR


class DNSConfigInternalError(DNSConfigError):
    """Unexpected failure."""

    code = ErrorCodes.DNS_INTERNAL_ERROR
