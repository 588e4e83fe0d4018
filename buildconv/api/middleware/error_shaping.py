from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from buildconv.core.errors import ConventionError, UnknownUnitError
from buildconv.core.observability.metrics import inc_named, record_declaration_error

log = logging.getLogger("buildconv.errors")


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id")


def _shaped(status: int, payload: Dict[str, Any], request_id: Optional[str]) -> JSONResponse:
    if request_id:
        payload["request_id"] = request_id
    return JSONResponse(status_code=status, content=payload)


def _status_for(exc: ConventionError) -> int:
    """Unknown units are 404; every other declaration error is the caller's 422."""
    return 404 if isinstance(exc, UnknownUnitError) else 422


async def convention_error_handler(request: Request, exc: ConventionError) -> JSONResponse:
    rid = _request_id(request)
    status = _status_for(exc)
    if status == 422:
        log.warning("Declaration rejected: %s rid=%s path=%s", exc, rid, request.url.path)
        record_declaration_error(exc)
    return _shaped(status, exc.to_dict(), rid)


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """Outermost guard: anything the routers did not map becomes a bare 500.

    The traceback stays in the server log under `buildconv.errors`; clients
    only get the request id to quote.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except ConventionError as exc:
            # raised outside the routers (e.g. from another middleware)
            return await convention_error_handler(request, exc)
        except Exception as exc:
            rid = _request_id(request)
            inc_named("errors_unhandled")
            log.exception("Unhandled %s rid=%s path=%s", type(exc).__name__, rid, request.url.path)
            return _shaped(500, {"detail": "Internal Server Error"}, rid)
