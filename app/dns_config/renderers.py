"""BIND configuration template renderer.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

import os
from datetime import date

import jinja2

from .companions import (
    companion_path,
    dump_options,
    dump_zone,
    dump_zone_definitions,
)
from .constants import (
    DEFAULT_EXPIRE,
    DEFAULT_MINIMUM_TTL,
    DEFAULT_REFRESH,
    DEFAULT_RETRY,
    DEFAULT_TTL,
)
from .dto import ArtifactDTO, RenderedZoneDTO, ResolvedPathsDTO
from .enums import DNSRecordType
from .records import render_record
from .schemas import DNSConfigurationSchema, ZoneSchema
from .utils import (
    date_serial,
    ensure_trailing_dot,
    parse_int,
    parse_int_or_default,
)


def format_acl(items: list[str], default: str = "none") -> str:
    """Build BIND address match list, `["a", "b"]` -> `{ a; b; }`."""
    return "{ " + "; ".join(items or [default]) + "; }"


def format_admin_email(admin_email: str) -> str:
    """Turn mailbox into SOA RNAME, `admin@x.org` -> `admin.x.org.`."""
    return ensure_trailing_dot(admin_email.replace("@", ".", 1))


def _is_apex(name: str, zone_name: str) -> bool:
    return name in {"@", ""} or (
        ensure_trailing_dot(name).lower()
        == ensure_trailing_dot(zone_name).lower()
    )


def find_apex_nameserver(zone: ZoneSchema) -> str | None:
    """Get value of the first apex NS record."""
    for record in zone.records:
        if record.type == DNSRecordType.NS and _is_apex(
            record.name,
            zone.zone_name,
        ):
            return record.value
    return None


class BindTemplateRenderer:
    """Renderer for BIND configuration artifacts.

    Every method is pure apart from the wall clock date used when a zone
    has no explicit serial.
    """

    def __init__(self, templates: jinja2.Environment) -> None:
        """Initialize renderer with Jinja2 templates."""
        self._templates = templates

    def render_zone(
        self,
        zone: ZoneSchema,
        today: date | None = None,
    ) -> RenderedZoneDTO:
        """Render complete zone file of a zone.

        Algorithm:
            1. Take serial from SOA settings or build `YYYYMMDD01`.
            2. Pick primary NS: SOA settings, apex NS record or
            `ns1.<zone>.`.
            3. Format admin mailbox as SOA RNAME.
            4. Parse SOA timers with fallbacks.
            5. Synthesize apex NS record if the zone has none.
            6. Render records in given order, dropping malformed ones.

        Args:
            zone (ZoneSchema): zone to render.
            today (date | None): date for serial synthesis.

        Returns:
            RenderedZoneDTO: zone file text and diagnostics.

        """
        soa = zone.soa_settings

        serial = parse_int(soa.serial)
        if serial is None:
            serial = date_serial(today)

        apex_ns = find_apex_nameserver(zone)
        primary_ns = ensure_trailing_dot(
            soa.primary_nameserver or apex_ns or f"ns1.{zone.zone_name}",
        )
        admin_email = format_admin_email(
            soa.admin_email or f"hostmaster@{zone.zone_name}",
        )

        lines: list[str] = []
        diagnostics: list[str] = []
        for record in zone.records:
            rendered = render_record(record)
            diagnostics.extend(rendered.diagnostics)
            if rendered.line is not None:
                lines.append(rendered.line)

        content = self._templates.get_template("zone.template").render(
            ttl=parse_int_or_default(soa.ttl, DEFAULT_TTL),
            primary_ns=primary_ns,
            admin_email=admin_email,
            serial=serial,
            refresh=parse_int_or_default(soa.refresh, DEFAULT_REFRESH),
            retry=parse_int_or_default(soa.retry, DEFAULT_RETRY),
            expire=parse_int_or_default(soa.expire, DEFAULT_EXPIRE),
            minimum_ttl=parse_int_or_default(
                soa.minimum_ttl,
                DEFAULT_MINIMUM_TTL,
            ),
            synthesize_ns=apex_ns is None,
            lines=lines,
        )
        return RenderedZoneDTO(content, diagnostics)

    def render_options(
        self,
        config: DNSConfigurationSchema,
        paths: ResolvedPathsDTO,
    ) -> str:
        """Render global options file with include of zone definitions."""
        return self._templates.get_template("named.conf.template").render(
            directory=paths.zones_dir,
            listen_on=format_acl(config.listen_on, "any"),
            allow_query=format_acl(config.allow_query, "any"),
            allow_recursion=format_acl(config.allow_recursion, "localhost"),
            forwarders=(
                format_acl(config.forwarders) if config.forwarders else None
            ),
            dnssec_validation=config.dnssec_validation,
            query_logging=config.query_logging,
            zone_include_file=paths.zone_include_file,
        )

    def render_zone_inclusions(
        self,
        config: DNSConfigurationSchema,
        paths: ResolvedPathsDTO,
    ) -> str:
        """Render zone definitions file, one stanza per zone.

        Production BIND resolves bare file names against its working
        directory, sandbox runs need absolute paths.
        """
        zones = [
            {
                "name": zone.zone_name,
                "type": zone.zone_type,
                "file": (
                    os.path.join(paths.zones_dir, zone.file_name)
                    if paths.simulated
                    else zone.file_name
                ),
                "allow_update": format_acl(zone.allow_update),
            }
            for zone in config.zones
        ]
        template = self._templates.get_template("named.conf.zones.template")
        return template.render(
            zones=zones,
            allow_transfer=(
                format_acl(config.allow_transfer)
                if config.allow_transfer
                else None
            ),
        )

    def render_artifacts(
        self,
        config: DNSConfigurationSchema,
        paths: ResolvedPathsDTO,
        today: date | None = None,
    ) -> tuple[list[ArtifactDTO], list[str]]:
        """Render every artifact in write order: zones, options, include.

        Each artifact is followed by its JSON companion.

        Returns:
            tuple[list[ArtifactDTO], list[str]]: artifacts and diagnostics.

        """
        artifacts: list[ArtifactDTO] = []
        diagnostics: list[str] = []

        for zone in config.zones:
            rendered = self.render_zone(zone, today)
            diagnostics.extend(
                f"{zone.zone_name}: {diagnostic}"
                for diagnostic in rendered.diagnostics
            )
            zone_file = os.path.join(paths.zones_dir, zone.file_name)
            artifacts.append(
                ArtifactDTO(
                    path=zone_file,
                    content=rendered.content,
                    zone_name=zone.zone_name,
                ),
            )
            artifacts.append(
                ArtifactDTO(companion_path(zone_file), dump_zone(zone)),
            )

        artifacts.append(
            ArtifactDTO(
                path=paths.options_file,
                content=self.render_options(config, paths),
            ),
        )
        artifacts.append(
            ArtifactDTO(
                companion_path(paths.options_file),
                dump_options(config),
            ),
        )
        artifacts.append(
            ArtifactDTO(
                path=paths.zone_include_file,
                content=self.render_zone_inclusions(config, paths),
            ),
        )
        artifacts.append(
            ArtifactDTO(
                companion_path(paths.zone_include_file),
                dump_zone_definitions(config),
            ),
        )
        return artifacts, diagnostics
