"""Utils for DNS configuration module.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

import functools
import os
from datetime import date
from typing import Any, Callable

from loguru import logger as loguru_logger

from .constants import SERIAL_SUFFIX
from .exceptions import DNSConfigError, DNSConfigInternalError

LOGGER_NAME = "dnsconfig"

log = loguru_logger.bind(name=LOGGER_NAME)


def configure_log_sink(log_dir: str | None) -> int | None:
    """Add daily rotated file sink for DNS configuration messages."""
    if not log_dir:
        return None

    return loguru_logger.add(
        os.path.join(log_dir, "dnsconfig_{time:DD-MM-YYYY}.log"),
        filter=lambda rec: rec["extra"].get("name") == LOGGER_NAME,
        retention="10 days",
        rotation="1d",
        colorize=False,
    )


def logger_wraps(is_stub: bool = False) -> Callable:
    """Log configuration manager calls.

    Domain errors are logged and re-raised as is, anything else is
    logged with traceback and wrapped into `DNSConfigInternalError`.
    """

    def wrapper(func: Callable) -> Callable:
        name = func.__name__
        bus_type = " stub " if is_stub else " "

        @functools.wraps(func)
        async def wrapped(*args: Any, **kwargs: Any) -> Any:
            logger = log.opt(depth=1)

            logger.info(f"Calling{bus_type}'{name}'")
            try:
                result = await func(*args, **kwargs)
            except DNSConfigError as err:
                logger.error(f"{name} call raised: {err}")
                raise
            except Exception as err:
                logger.opt(exception=err).error(
                    f"{name} call failed unexpectedly",
                )
                raise DNSConfigInternalError(
                    f"Unexpected error in {name}: {err}",
                ) from err
            else:
                if not is_stub:
                    logger.success(f"Executed {name}")
            return result

        return wrapped

    return wrapper


def ensure_trailing_dot(value: str) -> str:
    """Make name fully qualified, `a.b` -> `a.b.`."""
    return value if value.endswith(".") else f"{value}."


def parse_int(value: str | int | None) -> int | None:
    """Parse decimal string, `None` when absent or malformed."""
    if isinstance(value, int):
        return value

    if value is None or not value.strip():
        return None

    try:
        return int(value.strip(), 10)
    except ValueError:
        return None


def parse_int_or_default(value: str | int | None, default: int) -> int:
    """Parse decimal string with fallback."""
    parsed = parse_int(value)
    return default if parsed is None else parsed


def date_serial(today: date | None = None) -> int:
    """Build `YYYYMMDD01` zone serial."""
    today = today or date.today()
    return int(today.strftime("%Y%m%d") + SERIAL_SUFFIX)
