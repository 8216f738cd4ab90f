"""Test main config.

Copyright (c) 2024 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

from pathlib import Path
from typing import AsyncIterator
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio
from dishka import AsyncContainer, Scope, make_async_container, provide
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI

from config import Settings
from dns_config import (
    AbstractBindController,
    BindTemplateRenderer,
    ConfigFileWriter,
    DNSConfigUseCase,
    SimulatedBindController,
    SystemBindController,
)
from dns_config.dto import DNSServiceStatusDTO
from dns_config.enums import DNSServiceState
from enums import ExecutionMode
from ioc import BindSimulator, DNSConfigProvider
from web_app import create_app


class TestProvider(DNSConfigProvider):
    """Provider with mocked BIND controllers."""

    def __init__(
        self,
        controller: AsyncMock,
        simulator: AsyncMock,
    ) -> None:
        """Set mocks."""
        super().__init__()
        self._controller = controller
        self._simulator = simulator

    @provide(scope=Scope.APP)
    def get_controller(self) -> AbstractBindController:
        """Get mock controller."""
        return self._controller

    @provide(scope=Scope.APP)
    def get_simulator(self) -> BindSimulator:
        """Get mock simulator."""
        return BindSimulator(self._simulator)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Get development settings pointing into temp directory."""
    return Settings(
        DNS_MODE=ExecutionMode.DEVELOPMENT,
        DNS_SANDBOX_DIR=str(tmp_path / "sandbox"),
        DNS_ZONES_DIR=str(tmp_path / "var" / "named"),
        DNS_OPTIONS_FILE=str(tmp_path / "etc" / "named.conf"),
        DNS_ZONE_INCLUDE_FILE=str(tmp_path / "etc" / "named.rfc1912.zones"),
        DNS_LOG_DIR=None,
    )


@pytest.fixture
def production_settings(settings: Settings, tmp_path: Path) -> Settings:
    """Get production settings with existing system directories."""
    (tmp_path / "var" / "named").mkdir(parents=True)
    (tmp_path / "etc").mkdir()
    return settings.model_copy(update={"DNS_MODE": ExecutionMode.PRODUCTION})


@pytest.fixture
def bind_controller() -> AsyncMock:
    """Get mock of controller running BIND tools."""
    controller = AsyncMock(spec=SystemBindController)
    controller.get_status.return_value = DNSServiceStatusDTO(
        state=DNSServiceState.ACTIVE,
        simulated=False,
    )
    return controller


@pytest.fixture
def bind_simulator() -> AsyncMock:
    """Get mock of controller logging BIND tools calls."""
    simulator = AsyncMock(spec=SimulatedBindController)
    simulator.get_status.return_value = DNSServiceStatusDTO(
        state=DNSServiceState.INACTIVE,
        simulated=True,
    )
    return simulator


@pytest.fixture
def renderer() -> BindTemplateRenderer:
    """Get renderer with real templates."""
    return BindTemplateRenderer(Settings.TEMPLATES)


@pytest.fixture
def writer() -> ConfigFileWriter:
    """Get filesystem writer."""
    return ConfigFileWriter()


@pytest.fixture
def use_case(
    settings: Settings,
    renderer: BindTemplateRenderer,
    writer: ConfigFileWriter,
    bind_controller: AsyncMock,
    bind_simulator: AsyncMock,
) -> DNSConfigUseCase:
    """Get development use case."""
    return DNSConfigUseCase(
        settings=settings,
        renderer=renderer,
        writer=writer,
        controller=bind_controller,
        simulator=bind_simulator,
    )


@pytest.fixture
def production_use_case(
    production_settings: Settings,
    renderer: BindTemplateRenderer,
    writer: ConfigFileWriter,
    bind_controller: AsyncMock,
    bind_simulator: AsyncMock,
) -> DNSConfigUseCase:
    """Get production use case."""
    return DNSConfigUseCase(
        settings=production_settings,
        renderer=renderer,
        writer=writer,
        controller=bind_controller,
        simulator=bind_simulator,
    )


@pytest.fixture
def config_payload() -> dict:
    """Get configuration with one master zone, as sent by the UI."""
    return {
        "dnsServerStatus": False,
        "listenOn": "127.0.0.1;",
        "allowQuery": "localhost; 127.0.0.1;",
        "allowRecursion": "localhost;",
        "forwarders": "8.8.8.8; 8.8.4.4;",
        "allowTransfer": "",
        "dnssecValidation": False,
        "zones": [
            {
                "id": "zone-1",
                "zoneName": "example.com",
                "zoneType": "master",
                "fileName": "example.com.zone",
                "allowUpdate": "none;",
                "soaSettings": {
                    "ttl": "3600",
                    "adminEmail": "admin@example.com",
                    "refresh": "3600",
                    "retry": "1800",
                    "expire": "604800",
                    "minimumTtl": "86400",
                },
                "records": [
                    {"type": "A", "name": "@", "value": "192.168.1.100"},
                    {"type": "CNAME", "name": "www", "value": "@"},
                    {
                        "type": "MX",
                        "name": "@",
                        "value": "mail.example.com",
                        "priority": "10",
                    },
                ],
            },
        ],
    }


@pytest_asyncio.fixture(scope="function")
async def container(
    settings: Settings,
    bind_controller: AsyncMock,
    bind_simulator: AsyncMock,
) -> AsyncIterator[AsyncContainer]:
    """Create test container."""
    ctnr = make_async_container(
        TestProvider(bind_controller, bind_simulator),
        context={Settings: settings},
    )
    yield ctnr
    await ctnr.close()


@pytest_asyncio.fixture(scope="function")
async def app(
    settings: Settings,
    container: AsyncContainer,
) -> AsyncIterator[FastAPI]:
    """App creator fixture."""
    app = create_app(settings)
    setup_dishka(container, app)
    yield app


@pytest_asyncio.fixture(scope="function")
async def http_client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    """Get client bound to the app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app, root_path="/api"),
        timeout=3,
        base_url="http://test",
    ) as client:
        yield client
