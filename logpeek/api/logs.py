"""Paginated, filtered log table endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from logpeek.api.deps import clean_names, get_query_engine
from logpeek.models.responses import LogEntryOut, LogTableResponse
from logpeek.services.query import QueryEngine, QueryError, SearchFilter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["logs"])


@router.get("/log_table", response_model=LogTableResponse)
def log_table(
    page: int = Query(...),
    items_per_page: int = Query(...),
    min_log_level: str | None = None,
    module_name: str | None = None,
    message: str | None = None,
    start_timestamp: str | None = None,
    end_timestamp: str | None = None,
    applications: list[str] | None = Query(None),
    engine: QueryEngine = Depends(get_query_engine),
):
    try:
        search_filter = SearchFilter.build(
            min_log_level=min_log_level,
            module_name=module_name,
            message=message,
            start_timestamp=start_timestamp,
            end_timestamp=end_timestamp,
        )
        result = engine.search(page, items_per_page, search_filter, clean_names(applications))
    except QueryError as exc:
        logger.info("Rejected log table query: %s", exc)
        return JSONResponse(status_code=400, content=LogTableResponse(error=str(exc)).model_dump())

    return LogTableResponse(
        total_items=result.total_items,
        logs=[
            LogEntryOut(
                timestamp=row.entry.timestamp,
                level=row.entry.level.name,
                module=row.entry.module,
                message=row.entry.message,
                application=row.application,
            )
            for row in result.entries
        ],
    )


__all__ = ["router"]
