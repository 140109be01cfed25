"""Shared fixtures for the logpeek test suite."""

import os
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from logpeek.core.app_config import DEFAULT_PARSER, parse_server_config
from logpeek.models.entry import LogEntry, LogLevel
from logpeek.services.ring_buffer import RingBuffer
from logpeek.services.store import LogStore

NOW = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def log_line():
    def _line(ts: datetime, level: str = "INFO", module: str = "mod", message: str = "msg") -> str:
        return f"{ts.isoformat().replace('+00:00', 'Z')} {level} {module} - {message}"

    return _line


@pytest.fixture
def write_log(tmp_path):
    """Write ``lines`` to ``tmp_path / name`` and optionally pin its mtime."""

    def _write(name, lines, mtime_ns=None, append=False):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a" if append else "w", encoding="utf-8") as fh:
            fh.writelines(f"{line}\n" for line in lines)
        if mtime_ns is not None:
            os.utime(path, ns=(mtime_ns, mtime_ns))
        return path

    return _write


@pytest.fixture
def make_config():
    def _make(*apps, cooldown=10, secret=None):
        applications = []
        for app in apps:
            payload = {"parser": DEFAULT_PARSER, "timeformat": "iso8601"}
            payload.update(app)
            applications.append(payload)
        return parse_server_config(
            {
                "main": {"buffer_update_cooldown": cooldown, "secret": secret},
                "application": applications,
            }
        )

    return _make


@pytest.fixture
def entry():
    def _entry(ts, level=LogLevel.INFO, module="mod", message="msg", application=0):
        return LogEntry(timestamp=ts, level=level, module=module, message=message, application=application)

    return _entry


@pytest.fixture
def populated_store(make_config):
    """Build a store whose buffers are filled directly, bypassing file ingestion."""

    def _populate(apps, capacity=100):
        store = LogStore(make_config(*({"path": name, "buffer_size": capacity} for name in apps)))
        for name, entries in apps.items():
            handle = store.registry.resolve(name)
            buffer = RingBuffer(capacity)
            for item in entries:
                buffer.push(replace(item, application=handle))
            store.buffers[handle] = buffer
        return store

    return _populate
