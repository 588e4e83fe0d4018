from __future__ import annotations

import logging

from fastapi import APIRouter
from starlette.responses import JSONResponse

from buildconv.api.provider import get_root_project
from buildconv.core.errors import ConventionError
from buildconv.core.observability.metrics import inc_named

log = logging.getLogger("buildconv.api")

router = APIRouter()


@router.get("/health/live")
async def live():
    inc_named("health_live")
    return {"status": "ok"}


@router.get("/api/v1/health/live")
def liveness():
    inc_named("health_live")
    return {"status": "alive"}


@router.get("/api/v1/health/ready")
def readiness():
    """
    Ready once the declaration is loaded, validated and frozen.
    """
    inc_named("health_ready")
    try:
        root = get_root_project()
    except (ConventionError, OSError) as e:
        log.warning("readiness failed: %s", e)
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "problems": [f"{type(e).__name__}: {e}"]},
        )

    return {
        "status": "ready",
        "units": len(root.registry),
        "conventions_fingerprint": root.conventions_fingerprint,
    }
