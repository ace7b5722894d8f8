"""Dockerflow Endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, Response

from favicache.icons import get_resolver
from favicache.icons.resolver import IconResolver
from favicache.utils.version import Version, fetch_app_version_from_file

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/__version__",
    tags=["__version__"],
    summary="Dockerflow: __version__",
)
async def version() -> Version:
    """Dockerflow: Query service version."""
    try:
        return fetch_app_version_from_file()
    except FileNotFoundError:
        raise HTTPException(status_code=500, detail="Version file does not exist")


@router.get("/__heartbeat__", tags=["__heartbeat__"], summary="Dockerflow: __heartbeat__")
async def heartbeat(resolver: IconResolver = Depends(get_resolver)) -> Response:
    """Dockerflow: Query service health.

    The service can only cache icons while its cache directory is writable, so
    that's reported as a failing check with a 503.
    """
    if await resolver.cache.is_writable():
        return Response(content="")

    return JSONResponse(
        status_code=503,
        content={"status": "error", "checks": {"icon_cache": "not writable"}},
    )


@router.get("/__lbheartbeat__", tags=["__lbheartbeat__"], summary="Dockerflow: __lbheartbeat__")
async def lbheartbeat() -> Response:
    """Dockerflow: Liveness check for the load balancer. Always an empty 200."""
    return Response(content="")
