"""Base Adapter.

Copyright (c) 2024 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

from typing import Protocol, TypeVar

_T = TypeVar("_T")


class BaseAdapter(Protocol[_T]):
    """Abstract Adapter interface."""

    _service: _T

    def __init__(self, service: _T) -> None:
        """Set service."""
        self._service = service
