"""Host telemetry endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from logpeek.api.deps import get_store, get_telemetry
from logpeek.models.responses import SystemInfoResponse
from logpeek.services.store import LogStore
from logpeek.services.telemetry import HostTelemetry

router = APIRouter(tags=["system"])


@router.get("/sysinfo", response_model=SystemInfoResponse)
def sysinfo(
    telemetry: HostTelemetry = Depends(get_telemetry),
    store: LogStore = Depends(get_store),
) -> SystemInfoResponse:
    usage, total = store.usage_summary()
    return SystemInfoResponse(**telemetry.snapshot(), log_buffer_usage=usage, total_entries=total)


__all__ = ["router"]
