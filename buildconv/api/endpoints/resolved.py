from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from buildconv.api.provider import get_root_project
from buildconv.core.conventions.models import Scope
from buildconv.core.declaration import root_project_from_dict

router = APIRouter(prefix="/api/v1", tags=["resolved"])


class DeclarationRequest(BaseModel):
    # Same shape as a declaration file; entries are validated by the table.
    root: Dict[str, Any] = Field(default_factory=dict)
    properties: Dict[str, str] = Field(default_factory=dict)
    units: List[Union[str, Dict[str, Any]]] = Field(default_factory=list)
    conventions: List[Dict[str, Any]] = Field(default_factory=list)


@router.get("/resolved")
def list_resolved():
    return get_root_project().resolve().to_dict()


@router.get("/resolved/{unit}")
def get_resolved(unit: str):
    return get_root_project().resolve().get(unit).to_dict()


@router.get("/resolved/{unit}/plugins")
def get_plugins(unit: str):
    return {"unit": unit, "plugins": list(get_root_project().resolve().plugins_for(unit))}


@router.get("/resolved/{unit}/dependencies")
def get_dependencies(
    unit: str,
    scope: Optional[Scope] = Query(default=None),
    effective: bool = Query(default=False),
):
    deps = get_root_project().resolve().dependencies_for(unit, scope, effective=effective)
    return {
        "unit": unit,
        "scope": scope.value if scope else None,
        "effective": effective,
        "dependencies": [d.to_dict() for d in deps],
    }


@router.get("/resolved/{unit}/format-rule")
def get_format_rule(unit: str):
    rule = get_root_project().resolve().format_rule_for(unit)
    return {"unit": unit, "format_rule": rule.to_dict() if rule else None}


@router.get("/resolved/{unit}/test-platform")
def get_test_platform(unit: str):
    return {"unit": unit, "test_platform": get_root_project().resolve().test_platform_for(unit)}


@router.post("/resolve")
def resolve_declaration(req: DeclarationRequest):
    root = root_project_from_dict(req.model_dump(), source="request body")
    return root.resolve().to_dict()
