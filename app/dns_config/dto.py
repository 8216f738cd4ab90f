"""DNS configuration DTO.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

import os
from dataclasses import dataclass, field

from .enums import DNSServiceState
from .schemas import DNSConfigurationSchema


@dataclass(frozen=True)
class ResolvedPathsDTO:
    """Targets of one configuration update."""

    zones_dir: str
    options_file: str
    zone_include_file: str
    simulated: bool

    @property
    def directories(self) -> list[str]:
        """Directories which must exist before writing."""
        return list(
            dict.fromkeys(
                [
                    self.zones_dir,
                    _parent(self.options_file),
                    _parent(self.zone_include_file),
                ],
            ),
        )


def _parent(path: str) -> str:
    return os.path.dirname(path) or "."


@dataclass
class RenderedRecordDTO:
    """Zone file line of a record or the reasons it was dropped."""

    line: str | None
    diagnostics: list[str] = field(default_factory=list)


@dataclass
class RenderedZoneDTO:
    """Zone file text with diagnostics of dropped records."""

    content: str
    diagnostics: list[str] = field(default_factory=list)


@dataclass
class ArtifactDTO:
    """Rendered file waiting to be written."""

    path: str
    content: str
    zone_name: str | None = None


@dataclass
class WrittenArtifactDTO:
    """Written file, what it and its `.bak` held before the write."""

    path: str
    previous_content: bytes | None
    backup_path: str | None
    previous_backup: bytes | None = None


@dataclass
class CommandResultDTO:
    """Outcome of an external command."""

    args: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        """Combined output for operator messages."""
        return "\n".join(
            part for part in (self.stdout.strip(), self.stderr.strip()) if part
        )


@dataclass
class DNSServiceStatusDTO:
    """Live state of the resolver service."""

    state: DNSServiceState
    simulated: bool

    @property
    def running(self) -> bool:
        """Check service is up."""
        return self.state == DNSServiceState.ACTIVE


@dataclass
class DNSApplyResultDTO:
    """Result of a successful configuration update."""

    applied_configuration: DNSConfigurationSchema
    paths: ResolvedPathsDTO
    written_files: list[str]
    warnings: list[str]
    reloaded: bool

    @property
    def simulated(self) -> bool:
        """Whether checker and reload were only logged."""
        return self.paths.simulated
