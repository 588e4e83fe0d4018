from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from buildconv.api.endpoints import conventions, health, metrics, resolved, units
from buildconv.api.middleware.error_shaping import SafeErrorMiddleware, convention_error_handler
from buildconv.api.middleware.request_context import RequestContextMiddleware
from buildconv.core.errors import ConventionError

app = FastAPI(
    title="Build Conventions API",
    version="0.1.0",
)

# ------------------------------------------------------------
# Middleware stack (ORDER MATTERS)
# Starlette reverses add_middleware order: the LAST call = OUTERMOST wrapper.
# Runtime order (outermost -> innermost):
#   SafeErrorMiddleware -> CORSMiddleware -> RequestContext -> handler
# ------------------------------------------------------------

app.add_middleware(RequestContextMiddleware)

_cors_origins_raw = os.getenv("BUILDCONV_CORS_ORIGINS", "").strip()
_cors_origins = [o.strip() for o in _cors_origins_raw.split(",") if o.strip()] if _cors_origins_raw else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.add_middleware(SafeErrorMiddleware)

app.add_exception_handler(ConventionError, convention_error_handler)


app.include_router(health.router)
app.include_router(metrics.router)
app.include_router(units.router)
app.include_router(conventions.router)
app.include_router(resolved.router)


@app.get("/health")
def health_check():
    return {"status": "healthy"}
