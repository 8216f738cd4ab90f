"""Error routing.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping

from dishka.integrations.fastapi import DishkaRoute
from fastapi_error_map import rule
from fastapi_error_map.routing import ErrorAwareRoute
from fastapi_error_map.rules import Rule
from fastapi_error_map.translators import ErrorTranslator

from enums import DomainCodes
from errors import BaseDomainException

ERROR_MAP_TYPE = dict[type[Exception], int | Rule] | None


@dataclass
class ErrorResponse:
    """Error response.

    `context` carries details of a failed update, such as the offending
    file or the rollback outcome.
    """

    type: str
    detail: str
    domain_code: DomainCodes
    error_code: IntEnum
    context: dict[str, Any] = field(default_factory=dict)


class DishkaErrorAwareRoute(ErrorAwareRoute, DishkaRoute):
    """Route class that combines ErrorAwareRoute and DishkaRoute."""


class DomainErrorTranslator(ErrorTranslator[ErrorResponse]):
    """Translates domain exceptions with their context."""

    domain_code: DomainCodes

    def __init__(self, domain_code: DomainCodes) -> None:
        """Initialize error translator."""
        self.domain_code = domain_code

    @property
    def error_response_model_cls(self) -> type[ErrorResponse]:
        return ErrorResponse

    def from_error(self, err: Exception) -> ErrorResponse:
        """Translate exception to error response."""
        if not isinstance(err, BaseDomainException):
            raise TypeError(f"Expected BaseDomainException, got {type(err)}")

        return ErrorResponse(
            type=type(err).__name__,
            detail=str(err),
            domain_code=self.domain_code,
            error_code=err.code,
            context=dict(err.context),
        )


def build_error_map(
    domain_code: DomainCodes,
    statuses: Mapping[type[BaseDomainException], int],
) -> ERROR_MAP_TYPE:
    """Map every domain exception to its HTTP status.

    All rules share one translator of the domain.
    """
    translator = DomainErrorTranslator(domain_code)
    error_map: dict[type[Exception], int | Rule] = {
        exc_type: rule(status=status_code, translator=translator)
        for exc_type, status_code in statuses.items()
    }
    return error_map
