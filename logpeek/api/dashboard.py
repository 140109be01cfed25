"""Dashboard aggregate endpoint."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query

from logpeek.api.deps import clean_names, get_query_engine
from logpeek.models.responses import DashboardResponse
from logpeek.services.query import QueryEngine

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard_info", response_model=DashboardResponse)
def dashboard_info(
    utc_offset: int = Query(0, description="Minutes added to UTC to get the viewer's local time"),
    applications: list[str] | None = Query(None),
    engine: QueryEngine = Depends(get_query_engine),
) -> DashboardResponse:
    stats = engine.dashboard(clean_names(applications), utc_offset_minutes=utc_offset)
    return DashboardResponse(**asdict(stats))


__all__ = ["router"]
