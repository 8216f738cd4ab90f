"""Common enums.

Copyright (c) 2024 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

from enum import IntEnum, StrEnum


class DomainCodes(IntEnum):
    """Error code parts."""

    DNS = 4


class ExecutionMode(StrEnum):
    """Where generated artifacts go and whether side effects are real."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
