"""Configured application listing."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from logpeek.api.deps import get_store
from logpeek.services.store import LogStore

router = APIRouter(tags=["logs"])


@router.get("/application_list")
def application_list(store: LogStore = Depends(get_store)) -> list[str]:
    return store.list_applications()


__all__ = ["router"]
