"""Module with settings.

Copyright (c) 2024 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

import os
from typing import ClassVar

import jinja2
from pydantic import BaseModel, IPvAnyAddress

from enums import ExecutionMode

VENDOR_VERSION = "0.4.0"


class Settings(BaseModel):
    """Settings of the server manager backend."""

    DEBUG: bool = False
    HOST: IPvAnyAddress = "0.0.0.0"  # type: ignore  # noqa
    HTTP_PORT: int = 8000
    AUTO_RELOAD: bool = False

    DNS_MODE: ExecutionMode = ExecutionMode.DEVELOPMENT

    DNS_ZONES_DIR: str = "/var/named"
    DNS_OPTIONS_FILE: str = "/etc/named.conf"
    DNS_ZONE_INCLUDE_FILE: str = "/etc/named.rfc1912.zones"
    DNS_SANDBOX_DIR: str = "./test/dns"

    DNS_CHECKCONF_BIN: str = "named-checkconf"
    DNS_CHECKZONE_BIN: str = "named-checkzone"
    DNS_SYSTEMCTL_BIN: str = "systemctl"
    DNS_SERVICE_NAME: str = "named"

    DNS_ROLLBACK_ON_FAILURE: bool = True
    DNS_LOG_DIR: str | None = "logs"

    TEMPLATES: ClassVar[jinja2.Environment] = jinja2.Environment(
        loader=jinja2.FileSystemLoader(
            os.path.join(os.path.dirname(__file__), "dns_config", "templates"),
        ),
        autoescape=False,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )

    @property
    def is_production(self) -> bool:
        """Check production mode."""
        return self.DNS_MODE == ExecutionMode.PRODUCTION

    @classmethod
    def from_os(cls) -> "Settings":
        """Get cls from environ."""
        return Settings(
            **{
                name: value
                for name, value in os.environ.items()
                if name in cls.model_fields
            },
        )
