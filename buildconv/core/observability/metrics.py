from __future__ import annotations

import re
from collections import Counter
from typing import Dict

from prometheus_client import Counter as PromCounter
from prometheus_client import Histogram

# Named counters (in-process snapshot)
_NAMED = Counter()

PROPAGATIONS_TOTAL = PromCounter(
    "buildconv_propagations_total",
    "Completed propagation runs",
)

RESOLVED_UNITS_TOTAL = PromCounter(
    "buildconv_resolved_units_total",
    "Resolved configurations produced",
)

DECLARATION_ERRORS_TOTAL = PromCounter(
    "buildconv_declaration_errors_total",
    "Rejected declarations",
    ["error"],
)

HTTP_REQUESTS_TOTAL = PromCounter(
    "buildconv_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "buildconv_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)


def normalize_path(path: str) -> str:
    """Reduce high-cardinality paths for metrics labels."""
    p = path or "/"
    # unit names
    p = re.sub(r"^(/api/v1/resolved)/[^/]+", r"\1/:unit", p)
    return p


def reset_metrics() -> None:
    """
    Test helper: clears named counters to avoid cross-test leakage.
    Prometheus collectors are process-wide and are not reset.
    """
    _NAMED.clear()


def inc_named(name: str, value: int = 1) -> None:
    if not name:
        return
    _NAMED[name] += int(value)


def snapshot_named() -> Dict[str, int]:
    return dict(_NAMED)


def record_propagation(unit_count: int) -> None:
    PROPAGATIONS_TOTAL.inc()
    RESOLVED_UNITS_TOTAL.inc(unit_count)
    inc_named("propagations")
    inc_named("resolved_units", unit_count)


def record_declaration_error(exc: Exception) -> None:
    name = type(exc).__name__
    DECLARATION_ERRORS_TOTAL.labels(error=name).inc()
    inc_named(f"declaration_error_{name}")
