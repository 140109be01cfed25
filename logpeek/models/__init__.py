"""Domain and response models."""

from .entry import LogEntry, LogLevel
from .responses import (
    DashboardResponse,
    LogEntryOut,
    LogTableResponse,
    SystemInfoResponse,
)

__all__ = [
    "LogEntry",
    "LogLevel",
    "DashboardResponse",
    "LogEntryOut",
    "LogTableResponse",
    "SystemInfoResponse",
]
