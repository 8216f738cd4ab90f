"""JSON companions of BIND artifacts.

Every written artifact gets a `<file>.json` next to it holding the
configuration it was rendered from. The editor reads the configuration
back from these files, BIND syntax is never parsed.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

import os
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from .constants import COMPANION_SUFFIX
from .dto import ResolvedPathsDTO
from .schemas import (
    DNSConfigurationSchema,
    DNSOptionsSchema,
    ZoneDefinitionSchema,
    ZoneDefinitionsSchema,
    ZoneSchema,
)
from .utils import log

_JSON_INDENT = 2

ModelT = TypeVar("ModelT", bound=BaseModel)


def companion_path(path: str) -> str:
    """Get path of JSON companion, `named.conf` -> `named.conf.json`."""
    return f"{path}{COMPANION_SUFFIX}"


def dump_zone(zone: ZoneSchema) -> str:
    return zone.model_dump_json(by_alias=True, indent=_JSON_INDENT)


def dump_options(config: DNSConfigurationSchema) -> str:
    """Dump global options without zones."""
    return config.model_dump_json(
        by_alias=True,
        include=set(DNSOptionsSchema.model_fields),
        indent=_JSON_INDENT,
    )


def dump_zone_definitions(config: DNSConfigurationSchema) -> str:
    """Dump zone declarations without SOA settings and records."""
    return config.model_dump_json(
        by_alias=True,
        include={"zones": {"__all__": set(ZoneDefinitionSchema.model_fields)}},
        indent=_JSON_INDENT,
    )


def _load(path: str, schema: type[ModelT]) -> ModelT | None:
    try:
        with open(path, encoding="utf-8") as file:
            return schema.model_validate_json(file.read())
    except FileNotFoundError:
        return None
    except (OSError, ValidationError) as err:
        log.warning(f"Ignoring unreadable companion {path}: {err}")
        return None


def load_configuration(
    paths: ResolvedPathsDTO,
) -> DNSConfigurationSchema | None:
    """Rebuild configuration from JSON companions of written artifacts.

    Algorithm:
        1. Read options companion and zone definitions companion, either
        one missing or broken means there is nothing to rebuild.
        2. Read companion of every declared zone file. A zone without
        readable companion is kept with its declaration only, records
        are lost for it.
        3. Validate the result as a whole configuration.

    Args:
        paths (ResolvedPathsDTO): paths of the last update.

    Returns:
        DNSConfigurationSchema | None: rebuilt configuration or `None`.

    """
    options = _load(companion_path(paths.options_file), DNSOptionsSchema)
    definitions = _load(
        companion_path(paths.zone_include_file),
        ZoneDefinitionsSchema,
    )
    if options is None or definitions is None:
        return None

    zones: list[ZoneSchema] = []
    for definition in definitions.zones:
        zone_file = os.path.join(paths.zones_dir, definition.file_name)
        zone = _load(companion_path(zone_file), ZoneSchema)
        if zone is None:
            log.warning(
                f"Could not read zone companion for {definition.zone_name}, "
                "returning zone without records",
            )
            zone = ZoneSchema.model_validate(definition.model_dump())
        zones.append(zone)

    try:
        return DNSConfigurationSchema.model_validate(
            {**options.model_dump(), "zones": zones},
        )
    except ValidationError as err:
        log.warning(f"Companions do not form a configuration: {err}")
        return None
