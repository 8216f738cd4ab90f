"""DNS configuration API schemas.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from dns_config.enums import DNSServiceState
from dns_config.schemas import DNSConfigurationSchema


class _CamelResponse(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DNSConfigurationApplyResponse(_CamelResponse):
    """Result of configuration update."""

    message: str
    data: DNSConfigurationSchema
    warnings: list[str]
    written_files: list[str]
    simulated: bool
    reloaded: bool


class DNSServiceStatusResponse(_CamelResponse):
    """Live state of DNS service."""

    state: DNSServiceState
    running: bool
    simulated: bool
