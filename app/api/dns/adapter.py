"""DNS configuration adapter.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

from typing import Any

from api.base_adapter import BaseAdapter
from dns_config import DNSConfigurationSchema, DNSConfigUseCase

from .schemas import DNSConfigurationApplyResponse, DNSServiceStatusResponse


class DNSConfigFastAPIAdapter(BaseAdapter[DNSConfigUseCase]):
    """DNS configuration adapter."""

    async def apply_configuration(
        self,
        data: dict[str, Any],
    ) -> DNSConfigurationApplyResponse:
        """Apply configuration, raw body is validated by use case."""
        result = await self._service.apply_configuration(data)

        if result.simulated:
            message = "DNS configuration saved (development mode)"
        else:
            message = "DNS configuration updated successfully"

        return DNSConfigurationApplyResponse(
            message=message,
            data=result.applied_configuration,
            warnings=result.warnings,
            written_files=result.written_files,
            simulated=result.simulated,
            reloaded=result.reloaded,
        )

    async def get_configuration(self) -> DNSConfigurationSchema:
        """Get current configuration."""
        return await self._service.get_current_configuration()

    async def get_status(self) -> DNSServiceStatusResponse:
        """Get DNS service status."""
        status = await self._service.get_service_status()
        return DNSServiceStatusResponse(
            state=status.state,
            running=status.running,
            simulated=status.simulated,
        )
