from __future__ import annotations

from fastapi import APIRouter

from buildconv.api.provider import get_root_project

router = APIRouter(prefix="/api/v1/units", tags=["units"])


@router.get("")
def list_units():
    root = get_root_project()
    units = root.registry.list()
    return {
        "root": root.name,
        "count": len(units),
        "units": [{**u.to_record(), "path": u.path} for u in units],
    }
