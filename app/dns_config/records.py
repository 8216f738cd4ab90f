"""Zone file lines of single resource records.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

from typing import Callable

from .dto import RenderedRecordDTO
from .enums import DNSRecordType
from .schemas import DNSRecordSchema
from .utils import ensure_trailing_dot, log, parse_int

RecordRenderer = Callable[[str, DNSRecordSchema], RenderedRecordDTO]


def _owner(record: DNSRecordSchema) -> str:
    name = record.name or "@"
    if record.ttl is not None:
        return f"{name} {record.ttl}"
    return name


def _render_address(owner: str, record: DNSRecordSchema) -> RenderedRecordDTO:
    return RenderedRecordDTO(f"{owner} IN {record.type} {record.value}")


def _render_cname(owner: str, record: DNSRecordSchema) -> RenderedRecordDTO:
    target = (
        record.value if record.value == "@"
        else ensure_trailing_dot(record.value)
    )
    return RenderedRecordDTO(f"{owner} IN CNAME {target}")


def _render_mx(owner: str, record: DNSRecordSchema) -> RenderedRecordDTO:
    priority = parse_int(record.priority)
    if priority is None:
        return RenderedRecordDTO(
            None,
            [
                f"Skipping malformed MX record ({record.name or '@'}): "
                "missing priority.",
            ],
        )

    exchange = ensure_trailing_dot(record.value)
    return RenderedRecordDTO(f"{owner} IN MX {priority} {exchange}")


def _render_txt(owner: str, record: DNSRecordSchema) -> RenderedRecordDTO:
    escaped = record.value.replace("\\", "\\\\").replace('"', '\\"')
    return RenderedRecordDTO(f'{owner} IN TXT "{escaped}"')


def _render_target(owner: str, record: DNSRecordSchema) -> RenderedRecordDTO:
    target = ensure_trailing_dot(record.value)
    return RenderedRecordDTO(f"{owner} IN {record.type} {target}")


def _render_srv(owner: str, record: DNSRecordSchema) -> RenderedRecordDTO:
    priority = parse_int(record.priority)
    weight = parse_int(record.weight)
    port = parse_int(record.port)

    if priority is None or weight is None or port is None:
        missing = [
            field_name
            for field_name, value in (
                ("priority", priority),
                ("weight", weight),
                ("port", port),
            )
            if value is None
        ]
        return RenderedRecordDTO(
            None,
            [
                f"Skipping malformed SRV record ({record.name or '@'}): "
                f"missing {', '.join(missing)}.",
            ],
        )

    target = ensure_trailing_dot(record.value)
    return RenderedRecordDTO(
        f"{owner} IN SRV {priority} {weight} {port} {target}",
    )


RECORD_RENDERERS: dict[DNSRecordType, RecordRenderer] = {
    DNSRecordType.A: _render_address,
    DNSRecordType.AAAA: _render_address,
    DNSRecordType.CNAME: _render_cname,
    DNSRecordType.MX: _render_mx,
    DNSRecordType.TXT: _render_txt,
    DNSRecordType.NS: _render_target,
    DNSRecordType.PTR: _render_target,
    DNSRecordType.SRV: _render_srv,
}


def render_record(record: DNSRecordSchema) -> RenderedRecordDTO:
    """Render one record into one zone file line.

    Rendering is best-effort: a record of an unknown type, or an MX/SRV
    record without its numeric fields, yields no line and a diagnostic
    instead of an error. Diagnostics are logged as warnings too.

    Args:
        record (DNSRecordSchema): record to render.

    Returns:
        RenderedRecordDTO: line or `None` with diagnostics.

    """
    try:
        record_type = DNSRecordType(str(record.type).upper())
    except ValueError:
        record_type = None

    renderer = RECORD_RENDERERS.get(record_type)  # type: ignore[arg-type]

    if renderer is None:
        result = RenderedRecordDTO(
            None,
            [
                f"Unsupported DNS record type: {record.type} "
                f"for name {record.name or '@'}.",
            ],
        )
    else:
        result = renderer(_owner(record), record)

    for diagnostic in result.diagnostics:
        log.warning(diagnostic)

    return result
