"""Test DNS configuration use cases.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from config import Settings
from dns_config import DNSConfigUseCase
from dns_config.exceptions import (
    DNSCheckError,
    DNSConfigInternalError,
    DNSConfigNotImplementedError,
    DNSConfigValidationError,
    DNSPermissionError,
    DNSReloadError,
    DNSWriteError,
)
from dns_config.renderers import BindTemplateRenderer
from dns_config.use_cases import get_update_lock
from dns_config.writer import ConfigFileWriter
from enums import ExecutionMode


@pytest.mark.asyncio
async def test_apply_development(
    use_case: DNSConfigUseCase,
    bind_controller: AsyncMock,
    bind_simulator: AsyncMock,
    config_payload: dict,
    tmp_path: Path,
) -> None:
    """Test example.com scenario written into sandbox without reload."""
    result = await use_case.apply_configuration(config_payload)

    sandbox = tmp_path / "sandbox"
    zone_file = sandbox / "zones" / "example.com.zone"
    content = zone_file.read_text()

    assert result.simulated
    assert not result.reloaded
    assert result.warnings == []
    assert result.written_files == [
        str(zone_file),
        str(zone_file) + ".json",
        str(sandbox / "config" / "named.conf"),
        str(sandbox / "config" / "named.conf.json"),
        str(sandbox / "config" / "named.conf.zones"),
        str(sandbox / "config" / "named.conf.zones.json"),
    ]
    assert "@ IN SOA ns1.example.com. admin.example.com. (" in content
    assert "@ IN NS ns1.example.com." in content
    assert "@ IN A 192.168.1.100" in content
    assert "www IN CNAME @" in content
    assert "@ IN MX 10 mail.example.com." in content

    bind_simulator.check_configuration.assert_awaited_once()
    bind_simulator.reload.assert_not_called()
    bind_controller.check_configuration.assert_not_called()


@pytest.mark.asyncio
async def test_apply_reloads_enabled_server(
    use_case: DNSConfigUseCase,
    bind_simulator: AsyncMock,
    config_payload: dict,
) -> None:
    """Test enabled server is reloaded after successful check."""
    config_payload["dnsServerStatus"] = True

    result = await use_case.apply_configuration(config_payload)

    assert result.reloaded
    bind_simulator.reload.assert_awaited_once()


@pytest.mark.asyncio
async def test_apply_empty_zones_touches_nothing(
    use_case: DNSConfigUseCase,
    config_payload: dict,
    tmp_path: Path,
) -> None:
    """Test configuration without zones is rejected before writing."""
    config_payload["zones"] = []

    with pytest.raises(DNSConfigValidationError) as exc_info:
        await use_case.apply_configuration(config_payload)

    assert exc_info.value.context["errors"]
    assert not (tmp_path / "sandbox").exists()


@pytest.mark.asyncio
async def test_apply_missing_production_paths(
    settings: Settings,
    renderer: BindTemplateRenderer,
    writer: ConfigFileWriter,
    bind_controller: AsyncMock,
    bind_simulator: AsyncMock,
    config_payload: dict,
    tmp_path: Path,
) -> None:
    """Test production without resolver falls back to sandbox."""
    config_payload["dnsServerStatus"] = True
    use_case = DNSConfigUseCase(
        settings=settings.model_copy(
            update={"DNS_MODE": ExecutionMode.PRODUCTION},
        ),
        renderer=renderer,
        writer=writer,
        controller=bind_controller,
        simulator=bind_simulator,
    )

    result = await use_case.apply_configuration(config_payload)

    assert result.simulated
    assert len(result.warnings) == 1
    assert (tmp_path / "sandbox" / "zones" / "example.com.zone").exists()
    assert not (tmp_path / "var").exists()
    bind_simulator.check_configuration.assert_awaited_once()
    bind_simulator.reload.assert_awaited_once()
    bind_controller.check_configuration.assert_not_called()
    bind_controller.reload.assert_not_called()


@pytest.mark.asyncio
async def test_apply_production(
    production_use_case: DNSConfigUseCase,
    bind_controller: AsyncMock,
    config_payload: dict,
    tmp_path: Path,
) -> None:
    """Test production update runs checkers and reload on host."""
    config_payload["dnsServerStatus"] = True

    result = await production_use_case.apply_configuration(config_payload)

    assert not result.simulated
    assert result.reloaded
    zone_include = (tmp_path / "etc" / "named.rfc1912.zones").read_text()
    assert 'file "example.com.zone";' in zone_include

    paths, zones = bind_controller.check_configuration.call_args.args
    assert paths == result.paths
    assert [zone.zone_name for zone in zones] == ["example.com"]
    bind_controller.reload.assert_awaited_once()


@pytest.mark.asyncio
async def test_apply_without_permission(
    production_settings: Settings,
    renderer: BindTemplateRenderer,
    bind_controller: AsyncMock,
    bind_simulator: AsyncMock,
    config_payload: dict,
    tmp_path: Path,
) -> None:
    """Test unwritable production directories fail before writing."""
    writer = ConfigFileWriter()
    writer.check_write_permission = Mock(  # type: ignore[method-assign]
        side_effect=lambda directory: directory.endswith("named"),
    )
    use_case = DNSConfigUseCase(
        settings=production_settings,
        renderer=renderer,
        writer=writer,
        controller=bind_controller,
        simulator=bind_simulator,
    )

    with pytest.raises(DNSPermissionError) as exc_info:
        await use_case.apply_configuration(config_payload)

    assert exc_info.value.context["can_write_zones"] is True
    assert exc_info.value.context["can_write_conf"] is False
    assert list((tmp_path / "var" / "named").iterdir()) == []
    bind_controller.check_configuration.assert_not_called()


@pytest.mark.asyncio
async def test_check_failure_rolls_back(
    production_use_case: DNSConfigUseCase,
    bind_controller: AsyncMock,
    config_payload: dict,
    tmp_path: Path,
) -> None:
    """Test rejected configuration restores previous files."""
    zone_file = tmp_path / "var" / "named" / "example.com.zone"
    zone_file.write_text("previous zone")
    bind_controller.check_configuration.side_effect = DNSCheckError(
        "Zone check failed for example.com",
        file=str(zone_file),
        zone="example.com",
    )

    with pytest.raises(DNSCheckError) as exc_info:
        await production_use_case.apply_configuration(config_payload)

    assert exc_info.value.context["rolled_back"] is True
    assert exc_info.value.context["unrestored"] == []
    assert zone_file.read_text() == "previous zone"
    assert not (tmp_path / "etc" / "named.conf").exists()
    assert not (tmp_path / "etc" / "named.rfc1912.zones").exists()
    assert not zone_file.with_name("example.com.zone.json").exists()
    assert not zone_file.with_name("example.com.zone.bak").exists()
    bind_controller.reload.assert_not_called()


@pytest.mark.asyncio
async def test_check_failure_without_rollback(
    production_settings: Settings,
    renderer: BindTemplateRenderer,
    writer: ConfigFileWriter,
    bind_controller: AsyncMock,
    bind_simulator: AsyncMock,
    config_payload: dict,
    tmp_path: Path,
) -> None:
    """Test disabled rollback leaves written files in place."""
    bind_controller.check_configuration.side_effect = DNSCheckError(
        "Configuration check failed",
    )
    use_case = DNSConfigUseCase(
        settings=production_settings.model_copy(
            update={"DNS_ROLLBACK_ON_FAILURE": False},
        ),
        renderer=renderer,
        writer=writer,
        controller=bind_controller,
        simulator=bind_simulator,
    )

    with pytest.raises(DNSCheckError) as exc_info:
        await use_case.apply_configuration(config_payload)

    assert exc_info.value.context["rolled_back"] is False
    assert (tmp_path / "etc" / "named.conf").exists()


@pytest.mark.asyncio
async def test_write_failure_rolls_back(
    production_settings: Settings,
    renderer: BindTemplateRenderer,
    bind_controller: AsyncMock,
    bind_simulator: AsyncMock,
    config_payload: dict,
    tmp_path: Path,
) -> None:
    """Test failed write restores files written before it."""
    options_file = str(tmp_path / "etc" / "named.conf")
    zone_file = tmp_path / "var" / "named" / "example.com.zone"
    zone_file.write_text("previous zone")

    def write(path: str, content: str) -> None:
        if path == options_file:
            raise PermissionError(13, "Permission denied", path)
        ConfigFileWriter.write(path, content)

    writer = ConfigFileWriter()
    writer.write = Mock(side_effect=write)  # type: ignore[method-assign]
    use_case = DNSConfigUseCase(
        settings=production_settings,
        renderer=renderer,
        writer=writer,
        controller=bind_controller,
        simulator=bind_simulator,
    )

    with pytest.raises(DNSWriteError) as exc_info:
        await use_case.apply_configuration(config_payload)

    assert exc_info.value.context["file"] == options_file
    assert exc_info.value.context["rolled_back"] is True
    assert zone_file.read_text() == "previous zone"
    assert not (tmp_path / "etc" / "named.conf").exists()
    bind_controller.check_configuration.assert_not_called()


@pytest.mark.asyncio
async def test_reload_failure_keeps_files(
    production_use_case: DNSConfigUseCase,
    bind_controller: AsyncMock,
    config_payload: dict,
    tmp_path: Path,
) -> None:
    """Test reload failure does not roll back written files."""
    config_payload["dnsServerStatus"] = True
    bind_controller.reload.side_effect = DNSReloadError("reload failed")

    with pytest.raises(DNSReloadError):
        await production_use_case.apply_configuration(config_payload)

    assert (tmp_path / "var" / "named" / "example.com.zone").exists()
    assert (tmp_path / "etc" / "named.conf").exists()


@pytest.mark.asyncio
async def test_unexpected_error_is_wrapped(
    use_case: DNSConfigUseCase,
    bind_simulator: AsyncMock,
    config_payload: dict,
) -> None:
    """Test unexpected failure becomes internal error."""
    bind_simulator.check_configuration.side_effect = RuntimeError("boom")

    with pytest.raises(DNSConfigInternalError):
        await use_case.apply_configuration(config_payload)


@pytest.mark.asyncio
async def test_current_configuration_default(
    use_case: DNSConfigUseCase,
) -> None:
    """Test default configuration is returned before first update."""
    config = await use_case.get_current_configuration()

    zone = config.zones[0]
    assert zone.zone_name == "example.com"
    assert zone.id
    assert [(rec.type, rec.name, rec.value) for rec in zone.records] == [
        ("A", "@", "192.168.1.100"),
        ("CNAME", "www", "@"),
    ]
    assert config.listen_on == ["127.0.0.1"]
    assert config.forwarders == ["8.8.8.8", "8.8.4.4"]
    assert config.dns_server_status is False


@pytest.mark.asyncio
async def test_current_configuration_live_status(
    production_use_case: DNSConfigUseCase,
) -> None:
    """Test default configuration reports running service."""
    config = await production_use_case.get_current_configuration()

    assert config.dns_server_status is True


@pytest.mark.asyncio
async def test_current_configuration_read_back(
    use_case: DNSConfigUseCase,
    config_payload: dict,
) -> None:
    """Test applied configuration is rebuilt from JSON companions."""
    config_payload["dnsServerStatus"] = True
    config_payload["zones"][0]["records"].append(
        {"type": "TXT", "name": "@", "value": 'v=spf1 "a" ~all', "ttl": 60},
    )
    applied = await use_case.apply_configuration(config_payload)

    config = await use_case.get_current_configuration()

    assert config.zones == applied.applied_configuration.zones
    assert config.zones[0].id == "zone-1"
    assert config.zones[0].records[2].priority == "10"
    assert config.zones[0].records[3].ttl == 60
    assert config.allow_query == ["localhost", "127.0.0.1"]
    assert config.forwarders == ["8.8.8.8", "8.8.4.4"]
    assert config.dnssec_validation is False
    assert config.dns_server_status is False


@pytest.mark.asyncio
async def test_current_configuration_zone_companion_missing(
    use_case: DNSConfigUseCase,
    config_payload: dict,
    tmp_path: Path,
) -> None:
    """Test zone without companion is returned without records."""
    await use_case.apply_configuration(config_payload)
    (tmp_path / "sandbox" / "zones" / "example.com.zone.json").unlink()

    config = await use_case.get_current_configuration()

    assert config.zones[0].zone_name == "example.com"
    assert config.zones[0].file_name == "example.com.zone"
    assert config.zones[0].allow_update == ["none"]
    assert config.zones[0].records == []


@pytest.mark.asyncio
async def test_current_configuration_not_implemented(
    use_case: DNSConfigUseCase,
    config_payload: dict,
    tmp_path: Path,
) -> None:
    """Test BIND files without JSON companions are not parsed back."""
    await use_case.apply_configuration(config_payload)
    config_dir = tmp_path / "sandbox" / "config"
    (config_dir / "named.conf.json").unlink()

    with pytest.raises(DNSConfigNotImplementedError) as exc_info:
        await use_case.get_current_configuration()

    assert exc_info.value.context["options_file"] == str(
        config_dir / "named.conf",
    )


@pytest.mark.asyncio
async def test_current_configuration_broken_companion(
    use_case: DNSConfigUseCase,
    config_payload: dict,
    tmp_path: Path,
) -> None:
    """Test unreadable companion counts as missing one."""
    await use_case.apply_configuration(config_payload)
    companion = tmp_path / "sandbox" / "config" / "named.conf.zones.json"
    companion.write_text("{not json")

    with pytest.raises(DNSConfigNotImplementedError):
        await use_case.get_current_configuration()


@pytest.mark.asyncio
async def test_apply_injected_zone_name(
    use_case: DNSConfigUseCase,
    config_payload: dict,
    tmp_path: Path,
) -> None:
    """Test zone name closing its BIND stanza is rejected before writing."""
    config_payload["zones"][0]["zoneName"] = (
        'example.com" IN { type master; file "/etc/shadow"; };\nzone "x'
    )

    with pytest.raises(DNSConfigValidationError):
        await use_case.apply_configuration(config_payload)

    assert not (tmp_path / "sandbox").exists()


@pytest.mark.asyncio
async def test_update_lock_per_directory(tmp_path: Path) -> None:
    """Test updates of one zones directory share a lock."""
    first = get_update_lock(str(tmp_path / "zones"))
    second = get_update_lock(str(tmp_path / "other" / ".." / "zones"))

    assert first is second
    assert get_update_lock(str(tmp_path / "other")) is not first


@pytest.mark.asyncio
async def test_concurrent_updates_are_serialized(
    use_case: DNSConfigUseCase,
    bind_simulator: AsyncMock,
    config_payload: dict,
) -> None:
    """Test second update checks only after first one finished."""
    events: list[str] = []

    async def check(*args: object) -> None:
        events.append("start")
        await asyncio.sleep(0.01)
        events.append("end")

    bind_simulator.check_configuration.side_effect = check

    await asyncio.gather(
        use_case.apply_configuration(config_payload),
        use_case.apply_configuration(config_payload),
    )

    assert events == ["start", "end", "start", "end"]
