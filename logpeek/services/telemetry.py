"""Host telemetry for the sysinfo endpoint and the startup memory check."""

from __future__ import annotations

import platform
import socket
import threading
import time

import psutil

GIB = 1024**3
CPU_SAMPLE_SECONDS = 0.2


def format_duration(seconds: float) -> str:
    """Format a duration as ``days:hours:minutes:seconds``."""
    total = max(0, int(seconds))
    return f"{total // 86400}:{(total % 86400) // 3600}:{(total % 3600) // 60}:{total % 60}"


class HostTelemetry:
    """psutil-backed host stats, locked independently of the log store."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.started_at = time.time()
        self.os = f"{platform.system()} {platform.release()}".strip()
        self.host_name = socket.gethostname()

    def available_memory(self) -> int:
        return psutil.virtual_memory().available

    def snapshot(self) -> dict[str, str]:
        with self._lock:
            cpu = psutil.cpu_percent(interval=CPU_SAMPLE_SECONDS)
            memory = psutil.virtual_memory()
            boot_time = psutil.boot_time()
        now = time.time()
        return {
            "memory_usage": f"{memory.used / GIB:.2f}",
            "total_memory": f"{memory.total / GIB:.2f}",
            "cpu_usage": f"{cpu:.2f}",
            "os": self.os,
            "host_name": self.host_name,
            "uptime": format_duration(now - boot_time),
            "server_uptime": format_duration(now - self.started_at),
        }


__all__ = ["HostTelemetry", "format_duration"]
