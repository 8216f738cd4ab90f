"""BIND checker and service control.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

import asyncio
import os
from abc import ABC, abstractmethod

from config import Settings

from .constants import RELOAD_FAILED_NOTE
from .dto import CommandResultDTO, DNSServiceStatusDTO, ResolvedPathsDTO
from .enums import DNSServiceState
from .exceptions import DNSCheckError, DNSReloadError
from .schemas import ZoneSchema
from .utils import log, logger_wraps


class AbstractBindController(ABC):
    """Validates written artifacts and controls the resolver service."""

    @abstractmethod
    async def check_configuration(
        self,
        paths: ResolvedPathsDTO,
        zones: list[ZoneSchema],
    ) -> None:
        """Validate options file and every zone file."""

    @abstractmethod
    async def reload(self) -> None:
        """Make the running service pick up new configuration."""

    @abstractmethod
    async def get_status(self) -> DNSServiceStatusDTO:
        """Get live service state."""


class SystemBindController(AbstractBindController):
    """Runs BIND tools and systemd on the host."""

    def __init__(self, settings: Settings) -> None:
        """Set command names from settings."""
        self._checkconf = settings.DNS_CHECKCONF_BIN
        self._checkzone = settings.DNS_CHECKZONE_BIN
        self._systemctl = settings.DNS_SYSTEMCTL_BIN
        self._service = settings.DNS_SERVICE_NAME

    async def _run(self, *args: str) -> CommandResultDTO:
        """Run command and wait for it, missing binary is a failed run."""
        log.debug(f"Running command: {' '.join(args)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as err:
            return CommandResultDTO(
                args=list(args),
                returncode=127,
                stdout="",
                stderr=str(err),
            )

        stdout, stderr = await proc.communicate()
        return CommandResultDTO(
            args=list(args),
            returncode=proc.returncode or 0,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )

    @logger_wraps()
    async def check_configuration(
        self,
        paths: ResolvedPathsDTO,
        zones: list[ZoneSchema],
    ) -> None:
        """Run `named-checkconf` then `named-checkzone` per zone.

        Stops on the first failing check.

        Raises:
            DNSCheckError: checker rejected a file, context holds the
            file, the zone and the checker output.

        """
        result = await self._run(self._checkconf, paths.options_file)
        if result.returncode != 0:
            raise DNSCheckError(
                f"Configuration check failed for {paths.options_file}",
                file=paths.options_file,
                output=result.output,
            )
        log.info("Configuration syntax check passed")

        for zone in zones:
            zone_file = os.path.join(paths.zones_dir, zone.file_name)
            result = await self._run(
                self._checkzone,
                zone.zone_name,
                zone_file,
            )
            if result.returncode != 0:
                raise DNSCheckError(
                    f"Zone check failed for {zone.zone_name}",
                    file=zone_file,
                    zone=zone.zone_name,
                    output=result.output,
                )
            log.info(f"Zone {zone.zone_name} check passed")

    @logger_wraps()
    async def reload(self) -> None:
        """Run `systemctl reload <service>`.

        Raises:
            DNSReloadError: reload command failed, files stay written.

        """
        result = await self._run(self._systemctl, "reload", self._service)
        if result.returncode != 0:
            raise DNSReloadError(
                f"Failed to reload {self._service}: {result.output}",
                output=result.output,
                note=RELOAD_FAILED_NOTE,
            )
        log.info(f"Service {self._service} reloaded")

    @logger_wraps()
    async def get_status(self) -> DNSServiceStatusDTO:
        result = await self._run(self._systemctl, "is-active", self._service)
        try:
            state = DNSServiceState(result.stdout.strip())
        except ValueError:
            state = DNSServiceState.UNKNOWN

        return DNSServiceStatusDTO(state=state, simulated=False)


class SimulatedBindController(AbstractBindController):
    """Logs the commands instead of running them."""

    def __init__(self, settings: Settings) -> None:
        """Set command names from settings."""
        self._checkconf = settings.DNS_CHECKCONF_BIN
        self._checkzone = settings.DNS_CHECKZONE_BIN
        self._reload_cmd = (
            f"{settings.DNS_SYSTEMCTL_BIN} reload {settings.DNS_SERVICE_NAME}"
        )

    @logger_wraps(is_stub=True)
    async def check_configuration(
        self,
        paths: ResolvedPathsDTO,
        zones: list[ZoneSchema],
    ) -> None:
        log.info(
            f"[DEV MODE] Would validate configuration with: "
            f"{self._checkconf} {paths.options_file}",
        )
        for zone in zones:
            zone_file = os.path.join(paths.zones_dir, zone.file_name)
            log.info(
                f"[DEV MODE] Would validate zone with: "
                f"{self._checkzone} {zone.zone_name} {zone_file}",
            )

    @logger_wraps(is_stub=True)
    async def reload(self) -> None:
        log.info(
            "[DEV MODE] Would reload BIND service with command: "
            f"{self._reload_cmd}",
        )
        log.info("BIND service reloaded successfully (simulated)")

    @logger_wraps(is_stub=True)
    async def get_status(self) -> DNSServiceStatusDTO:
        return DNSServiceStatusDTO(
            state=DNSServiceState.INACTIVE,
            simulated=True,
        )
