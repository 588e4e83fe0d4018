from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

from buildconv.api.provider import get_root_project
from buildconv.core.conventions.models import EntryKind

router = APIRouter(prefix="/api/v1/conventions", tags=["conventions"])


@router.get("")
def list_conventions(kind: Optional[EntryKind] = Query(default=None)):
    table = get_root_project().freeze()
    records = table.records()
    if kind is not None:
        records = [r for r in records if r["kind"] == kind.value]
    return {
        "count": len(records),
        "fingerprint": table.fingerprint,
        "properties": dict(table.properties),
        "entries": records,
    }
