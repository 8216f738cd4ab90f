"""Errors base.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

from enum import IntEnum
from typing import Any


class BaseDomainException(Exception):  # noqa N818
    """Base exception.

    Subclasses must declare `code`. Optional `context` keeps operator
    facing details (paths, command output) next to the message.
    """

    code: IntEnum

    def __init__(self, *args: object, **context: Any) -> None:
        """Set message args and context."""
        super().__init__(*args)
        self.context: dict[str, Any] = context

    def __init_subclass__(cls) -> None:
        """Initialize subclass."""
        super().__init_subclass__()

        if not hasattr(cls, "code"):
            raise AttributeError("code must be set")
