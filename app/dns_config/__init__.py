"""BIND configuration compiler.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

from .controller import (
    AbstractBindController,
    SimulatedBindController,
    SystemBindController,
)
from .dto import DNSApplyResultDTO, DNSServiceStatusDTO, ResolvedPathsDTO
from .exceptions import (
    DNSCheckError,
    DNSConfigError,
    DNSConfigInternalError,
    DNSConfigNotImplementedError,
    DNSConfigValidationError,
    DNSPermissionError,
    DNSReloadError,
    DNSWriteError,
)
from .paths import resolve_paths, sandbox_paths
from .renderers import BindTemplateRenderer
from .schemas import DNSConfigurationSchema, DNSRecordSchema, ZoneSchema
from .use_cases import DNSConfigUseCase
from .utils import configure_log_sink
from .writer import ConfigFileWriter, WriteJournal

__all__ = [
    "AbstractBindController",
    "SimulatedBindController",
    "SystemBindController",
    "DNSApplyResultDTO",
    "DNSServiceStatusDTO",
    "ResolvedPathsDTO",
    "DNSCheckError",
    "DNSConfigError",
    "DNSConfigInternalError",
    "DNSConfigNotImplementedError",
    "DNSConfigValidationError",
    "DNSPermissionError",
    "DNSReloadError",
    "DNSWriteError",
    "resolve_paths",
    "sandbox_paths",
    "BindTemplateRenderer",
    "DNSConfigurationSchema",
    "DNSRecordSchema",
    "ZoneSchema",
    "DNSConfigUseCase",
    "configure_log_sink",
    "ConfigFileWriter",
    "WriteJournal",
]
