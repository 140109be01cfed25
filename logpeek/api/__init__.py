"""API router definitions."""

from fastapi import APIRouter, Depends

from .applications import router as applications_router
from .dashboard import router as dashboard_router
from .deps import refresh_logs, require_auth
from .logs import router as logs_router
from .routes import health_router
from .sysinfo import router as sysinfo_router

_log_dependencies = [Depends(require_auth), Depends(refresh_logs)]

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(applications_router, dependencies=_log_dependencies)
api_router.include_router(dashboard_router, dependencies=_log_dependencies)
api_router.include_router(logs_router, dependencies=_log_dependencies)
api_router.include_router(sysinfo_router, dependencies=[Depends(require_auth)])

__all__ = ["api_router"]
