"""DI Provider for DNS configuration backend.

Copyright (c) 2024 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

from typing import NewType

from dishka import Provider, Scope, from_context, provide

from api.dns.adapter import DNSConfigFastAPIAdapter
from config import Settings
from dns_config import (
    AbstractBindController,
    BindTemplateRenderer,
    ConfigFileWriter,
    DNSConfigUseCase,
    SimulatedBindController,
    SystemBindController,
)

BindSimulator = NewType("BindSimulator", AbstractBindController)


class DNSConfigProvider(Provider):
    """Provider for DNS configuration."""

    scope = Scope.APP
    settings = from_context(provides=Settings, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def get_renderer(self, settings: Settings) -> BindTemplateRenderer:
        """Get renderer with artifact templates."""
        return BindTemplateRenderer(settings.TEMPLATES)

    @provide(scope=Scope.APP)
    def get_writer(self) -> ConfigFileWriter:
        """Get artifact writer."""
        return ConfigFileWriter()

    @provide(scope=Scope.APP)
    def get_controller(self, settings: Settings) -> AbstractBindController:
        """Get controller running BIND tools on the host."""
        return SystemBindController(settings)

    @provide(scope=Scope.APP)
    def get_simulator(self, settings: Settings) -> BindSimulator:
        """Get controller only logging BIND tools calls."""
        return BindSimulator(SimulatedBindController(settings))

    @provide(scope=Scope.REQUEST)
    def get_use_case(
        self,
        settings: Settings,
        renderer: BindTemplateRenderer,
        writer: ConfigFileWriter,
        controller: AbstractBindController,
        simulator: BindSimulator,
    ) -> DNSConfigUseCase:
        """Get DNS configuration use case."""
        return DNSConfigUseCase(
            settings=settings,
            renderer=renderer,
            writer=writer,
            controller=controller,
            simulator=simulator,
        )

    dns_config_adapter = provide(
        DNSConfigFastAPIAdapter,
        scope=Scope.REQUEST,
    )
