"""Resolve where BIND artifacts are written.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

import os

from config import Settings
from enums import ExecutionMode

from .constants import (
    SANDBOX_CONFIG_SUBDIR,
    SANDBOX_OPTIONS_NAME,
    SANDBOX_ZONE_INCLUDE_NAME,
    SANDBOX_ZONES_SUBDIR,
)
from .dto import ResolvedPathsDTO


def sandbox_paths(settings: Settings) -> ResolvedPathsDTO:
    """Get project local paths, side effects are simulated there."""
    sandbox = os.path.abspath(settings.DNS_SANDBOX_DIR)
    config_dir = os.path.join(sandbox, SANDBOX_CONFIG_SUBDIR)
    return ResolvedPathsDTO(
        zones_dir=os.path.join(sandbox, SANDBOX_ZONES_SUBDIR),
        options_file=os.path.join(config_dir, SANDBOX_OPTIONS_NAME),
        zone_include_file=os.path.join(config_dir, SANDBOX_ZONE_INCLUDE_NAME),
        simulated=True,
    )


def production_paths(settings: Settings) -> ResolvedPathsDTO:
    """Get system paths of the installed resolver."""
    return ResolvedPathsDTO(
        zones_dir=settings.DNS_ZONES_DIR,
        options_file=settings.DNS_OPTIONS_FILE,
        zone_include_file=settings.DNS_ZONE_INCLUDE_FILE,
        simulated=False,
    )


def resolve_paths(
    settings: Settings,
    mode: ExecutionMode | None = None,
) -> ResolvedPathsDTO:
    """Get artifact paths for execution mode, settings mode by default."""
    mode = mode or settings.DNS_MODE
    if mode == ExecutionMode.PRODUCTION:
        return production_paths(settings)
    return sandbox_paths(settings)


def missing_critical_paths(paths: ResolvedPathsDTO) -> list[str]:
    """Get production locations that must exist, but do not.

    Zones directory and the directory of the options file are required,
    their absence means the resolver is not installed on this host.
    """
    return [
        path
        for path in (paths.zones_dir, os.path.dirname(paths.options_file))
        if not os.path.isdir(path)
    ]
