"""Root API routers."""

from fastapi import APIRouter, Depends, Response

from .deps import require_auth

health_router = APIRouter(tags=["system"])


@health_router.get("/health", summary="Service health probe")
async def healthcheck() -> dict[str, str]:
    """Return a simple heartbeat for orchestration layers."""

    return {"status": "ok"}


@health_router.get("/authenticate", dependencies=[Depends(require_auth)])
def authenticate() -> Response:
    """A 200 response tells the dashboard its password is correct."""

    return Response(status_code=200)
