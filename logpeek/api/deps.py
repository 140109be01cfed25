"""API dependencies."""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from logpeek.services.query import QueryEngine
from logpeek.services.store import LogStore
from logpeek.services.telemetry import HostTelemetry

logger = logging.getLogger(__name__)

_basic = HTTPBasic(auto_error=False)


def get_store(request: Request) -> LogStore:
    return request.app.state.store


def get_query_engine(request: Request) -> QueryEngine:
    return request.app.state.query_engine


def get_telemetry(request: Request) -> HostTelemetry:
    return request.app.state.telemetry


def require_auth(
    request: Request,
    credentials: HTTPBasicCredentials | None = Depends(_basic),
) -> None:
    """Check the Basic-auth password against the configured secret.

    The user name is ignored. With no secret configured every request passes.
    """
    secret = request.app.state.config.secret
    if not secret:
        return
    if credentials is None:
        logger.warning("Missing authorization header for %s", request.url.path)
    elif secrets.compare_digest(credentials.password.encode("utf-8"), secret.encode("utf-8")):
        return
    else:
        logger.warning("Invalid credentials for %s", request.url.path)
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Basic"},
    )


def refresh_logs(
    store: LogStore = Depends(get_store),
    force_refresh: str | None = Header(default=None),
) -> None:
    """Re-ingest log files before serving, subject to the cooldown.

    Any ``force-refresh`` header bypasses the cooldown.
    """
    store.refresh(force=force_refresh is not None)


def clean_names(applications: list[str] | None) -> list[str] | None:
    if applications is None:
        return None
    names = [name for name in applications if name.strip()]
    return names or None
