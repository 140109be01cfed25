"""Response schemas for the HTTP API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class LogEntryOut(BaseModel):
    timestamp: datetime
    level: str
    module: str
    message: str
    application: str


class LogTableResponse(BaseModel):
    total_items: int = 0
    logs: list[LogEntryOut] = Field(default_factory=list)
    error: str | None = None


class DashboardResponse(BaseModel):
    total_logs_24: list[int]
    error_logs_24: list[int]
    warning_logs_24: list[int]
    total_logs_week: list[int]
    error_logs_week: list[int]
    warning_logs_week: list[int]
    top_modules_24: list[tuple[str, int]]
    top_modules_week: list[tuple[str, int]]
    log_buffer_usage: float
    total_entries: int


class SystemInfoResponse(BaseModel):
    memory_usage: str
    total_memory: str
    cpu_usage: str
    os: str
    host_name: str
    uptime: str
    server_uptime: str
    log_buffer_usage: float
    total_entries: int


__all__ = [
    "DashboardResponse",
    "LogEntryOut",
    "LogTableResponse",
    "SystemInfoResponse",
]
