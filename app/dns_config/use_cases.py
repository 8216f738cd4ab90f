"""DNS configuration use cases.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

import asyncio
import os
import uuid
from collections import defaultdict
from typing import Any, Mapping

from pydantic import ValidationError

from config import Settings

from .companions import load_configuration
from .constants import DEFAULT_CONFIGURATION
from .controller import AbstractBindController
from .dto import DNSApplyResultDTO, DNSServiceStatusDTO, ResolvedPathsDTO
from .exceptions import (
    DNSCheckError,
    DNSConfigNotImplementedError,
    DNSConfigValidationError,
    DNSPermissionError,
    DNSWriteError,
)
from .paths import missing_critical_paths, resolve_paths, sandbox_paths
from .renderers import BindTemplateRenderer
from .schemas import DNSConfigurationSchema
from .utils import log, logger_wraps
from .writer import ConfigFileWriter, WriteJournal

_update_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)


def get_update_lock(zones_dir: str) -> asyncio.Lock:
    """Get lock serializing updates of one zones directory."""
    return _update_locks[os.path.abspath(zones_dir)]


class DNSConfigUseCase:
    """Compiles configuration into BIND artifacts and applies them."""

    def __init__(
        self,
        settings: Settings,
        renderer: BindTemplateRenderer,
        writer: ConfigFileWriter,
        controller: AbstractBindController,
        simulator: AbstractBindController,
    ) -> None:
        """Initialize DNS configuration use case.

        Args:
            settings (Settings): application settings.
            renderer (BindTemplateRenderer): artifact renderer.
            writer (ConfigFileWriter): artifact writer.
            controller (AbstractBindController): runs checks and reload
                on the host.
            simulator (AbstractBindController): logs checks and reload
                for sandbox paths.

        """
        self._settings = settings
        self._renderer = renderer
        self._writer = writer
        self._controller = controller
        self._simulator = simulator

    def _get_controller(
        self,
        paths: ResolvedPathsDTO,
    ) -> AbstractBindController:
        return self._simulator if paths.simulated else self._controller

    @staticmethod
    def _validate(
        payload: DNSConfigurationSchema | Mapping[str, Any],
    ) -> DNSConfigurationSchema:
        if isinstance(payload, DNSConfigurationSchema):
            return payload

        try:
            return DNSConfigurationSchema.model_validate(payload)
        except ValidationError as err:
            raise DNSConfigValidationError(
                "Invalid DNS configuration",
                errors=err.errors(
                    include_url=False,
                    include_context=False,
                    include_input=False,
                ),
            ) from err

    def _resolve_target(self) -> tuple[ResolvedPathsDTO, list[str]]:
        """Get paths of this call, production falls back to sandbox.

        Raises:
            DNSPermissionError: production directories exist but can not
                be written.

        """
        paths = resolve_paths(self._settings)
        if paths.simulated:
            return paths, []

        missing = missing_critical_paths(paths)
        if missing:
            log.warning(
                f"Production paths are missing: {', '.join(missing)}. "
                "Switching to development mode for this operation.",
            )
            paths = sandbox_paths(self._settings)
            return paths, [
                "Resolver is not installed on this host, configuration was "
                f"written to {os.path.dirname(paths.zones_dir)}",
            ]

        can_write_zones = self._writer.check_write_permission(
            paths.zones_dir,
        )
        can_write_conf = self._writer.check_write_permission(
            os.path.dirname(paths.options_file),
        )
        if not (can_write_zones and can_write_conf):
            raise DNSPermissionError(
                "Insufficient permissions to write DNS configuration files",
                can_write_conf=can_write_conf,
                can_write_zones=can_write_zones,
                paths={
                    "zones_dir": paths.zones_dir,
                    "options_file": paths.options_file,
                    "zone_include_file": paths.zone_include_file,
                },
            )

        return paths, []

    def _rollback(self, journal: WriteJournal) -> dict[str, Any]:
        if not self._settings.DNS_ROLLBACK_ON_FAILURE:
            log.warning("Rollback is disabled, written files are kept")
            return {"rolled_back": False}

        log.warning(f"Rolling back {len(journal.entries)} written files")
        unrestored = journal.rollback()
        return {"rolled_back": True, "unrestored": unrestored}

    @logger_wraps()
    async def apply_configuration(
        self,
        payload: DNSConfigurationSchema | Mapping[str, Any],
    ) -> DNSApplyResultDTO:
        """Render, write, check and reload BIND configuration.

        Algorithm:
            1. Validate payload, nothing is touched on failure.
            2. Resolve paths: sandbox in development, production paths
            otherwise. Production without installed resolver falls back
            to sandbox for this call only, production without write
            permission fails.
            3. Under the lock of the zones directory create directories,
            render zones, options and zone definitions and write them
            with their JSON companions and `.bak` copies.
            4. Run checkers (or log them for sandbox paths). Failed write
            or check restores previous files when rollback is enabled.
            5. Reload service when `dns_server_status` is set.

        Args:
            payload (DNSConfigurationSchema | Mapping[str, Any]): full
                configuration.

        Returns:
            DNSApplyResultDTO: applied configuration, paths, written files
            and rendering warnings.

        Raises:
            DNSConfigValidationError: payload is malformed.
            DNSPermissionError: production directories are not writable.
            DNSWriteError: artifact could not be written.
            DNSCheckError: checker rejected written files.
            DNSReloadError: files are in place, reload failed.

        """
        config = self._validate(payload)
        paths, warnings = self._resolve_target()
        controller = self._get_controller(paths)

        async with get_update_lock(paths.zones_dir):
            journal = WriteJournal()
            try:
                for directory in paths.directories:
                    self._writer.ensure_directory(directory)

                artifacts, diagnostics = self._renderer.render_artifacts(
                    config,
                    paths,
                )
                warnings.extend(diagnostics)
                self._writer.write_artifacts(artifacts, journal)
            except OSError as err:
                context = self._rollback(journal)
                raise DNSWriteError(
                    f"Failed to write DNS configuration: {err}",
                    file=err.filename,
                    **context,
                ) from err

            try:
                await controller.check_configuration(paths, config.zones)
            except DNSCheckError as err:
                err.context.update(self._rollback(journal))
                raise

            log.info("DNS configuration successfully updated")

        reloaded = False
        if config.dns_server_status:
            await controller.reload()
            reloaded = True
        else:
            log.info("DNS server is disabled, skipping reload")

        return DNSApplyResultDTO(
            applied_configuration=config,
            paths=paths,
            written_files=journal.paths,
            warnings=warnings,
            reloaded=reloaded,
        )

    @logger_wraps()
    async def get_service_status(self) -> DNSServiceStatusDTO:
        """Get live state of the resolver service."""
        if self._settings.is_production:
            return await self._controller.get_status()
        return await self._simulator.get_status()

    @logger_wraps()
    async def get_current_configuration(self) -> DNSConfigurationSchema:
        """Get configuration to show in the editor.

        Configuration is rebuilt from JSON companions of the last update,
        BIND files are not parsed. Without any configuration on disk the
        default one is returned. Service state is always the live one.

        Raises:
            DNSConfigNotImplementedError: configuration files exist, but
                their JSON companions do not.

        """
        paths = resolve_paths(self._settings)
        if not paths.simulated and missing_critical_paths(paths):
            paths = sandbox_paths(self._settings)

        config = load_configuration(paths)
        if config is None:
            if os.path.exists(paths.options_file) and os.path.exists(
                paths.zone_include_file,
            ):
                raise DNSConfigNotImplementedError(
                    "Reading BIND configuration without JSON companions "
                    "is not supported",
                    options_file=paths.options_file,
                    zone_include_file=paths.zone_include_file,
                )

            log.info("No existing configuration found, returning default")
            config = DNSConfigurationSchema.model_validate(
                DEFAULT_CONFIGURATION,
            )
            for zone in config.zones:
                zone.id = str(uuid.uuid4())
                for record in zone.records:
                    record.id = str(uuid.uuid4())
        else:
            log.info("Loaded current DNS configuration from JSON companions")

        status = await self.get_service_status()
        config.dns_server_status = status.running
        return config
