"""DNS configuration router.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

from typing import Any

from dishka import FromDishka
from fastapi import Body, status
from fastapi_error_map.routing import ErrorAwareRouter

import dns_config.exceptions as dns_exc
from api.error_routing import DishkaErrorAwareRoute, build_error_map
from dns_config import DNSConfigurationSchema
from enums import DomainCodes

from .adapter import DNSConfigFastAPIAdapter
from .schemas import DNSConfigurationApplyResponse, DNSServiceStatusResponse

error_map = build_error_map(
    DomainCodes.DNS,
    {
        dns_exc.DNSConfigValidationError: status.HTTP_400_BAD_REQUEST,
        dns_exc.DNSPermissionError: status.HTTP_403_FORBIDDEN,
        dns_exc.DNSWriteError: status.HTTP_500_INTERNAL_SERVER_ERROR,
        dns_exc.DNSCheckError: status.HTTP_424_FAILED_DEPENDENCY,
        dns_exc.DNSReloadError: status.HTTP_502_BAD_GATEWAY,
        dns_exc.DNSConfigNotImplementedError: (
            status.HTTP_501_NOT_IMPLEMENTED
        ),
        dns_exc.DNSConfigInternalError: (
            status.HTTP_500_INTERNAL_SERVER_ERROR
        ),
    },
)

dns_router = ErrorAwareRouter(
    prefix="/dns",
    tags=["DNS Configuration"],
    route_class=DishkaErrorAwareRoute,
)


@dns_router.post("/configuration", error_map=error_map)
async def apply_dns_configuration(
    adapter: FromDishka[DNSConfigFastAPIAdapter],
    data: dict[str, Any] = Body(),
) -> DNSConfigurationApplyResponse:
    """Render, write, check and reload BIND configuration."""
    return await adapter.apply_configuration(data)


@dns_router.get("/configuration", error_map=error_map)
async def get_dns_configuration(
    adapter: FromDishka[DNSConfigFastAPIAdapter],
) -> DNSConfigurationSchema:
    """Get DNS configuration for the editor."""
    return await adapter.get_configuration()


@dns_router.get("/status", error_map=error_map)
async def get_dns_status(
    adapter: FromDishka[DNSConfigFastAPIAdapter],
) -> DNSServiceStatusResponse:
    """Get DNS service status."""
    return await adapter.get_status()
