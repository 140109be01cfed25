from types import SimpleNamespace

import pytest

from logpeek.services import telemetry
from logpeek.services.telemetry import GIB, HostTelemetry, format_duration


@pytest.mark.parametrize(
    "seconds,expected",
    [(0, "0:0:0:0"), (59.9, "0:0:0:59"), (3600, "0:1:0:0"), (90061, "1:1:1:1"), (-5, "0:0:0:0")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_snapshot_formats_host_stats(monkeypatch):
    memory = SimpleNamespace(used=3 * GIB, total=8 * GIB, available=5 * GIB)
    monkeypatch.setattr(telemetry.psutil, "virtual_memory", lambda: memory)
    monkeypatch.setattr(telemetry.psutil, "cpu_percent", lambda interval=None: 42.5)
    monkeypatch.setattr(telemetry.psutil, "boot_time", lambda: 1_000.0)
    monkeypatch.setattr(telemetry.time, "time", lambda: 1_000.0 + 90061)

    host = HostTelemetry()
    host.started_at = 1_000.0 + 90000
    snapshot = host.snapshot()

    assert snapshot["memory_usage"] == "3.00"
    assert snapshot["total_memory"] == "8.00"
    assert snapshot["cpu_usage"] == "42.50"
    assert snapshot["uptime"] == "1:1:1:1"
    assert snapshot["server_uptime"] == "0:0:1:1"
    assert snapshot["host_name"]
    assert host.available_memory() == 5 * GIB
