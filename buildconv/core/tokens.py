from __future__ import annotations

import re
from typing import Any, Optional

# ${name} reference to a root-level version property
PROPERTY_REF = re.compile(r"^\$\{([A-Za-z_][A-Za-z0-9_.-]*)\}$")


def version_problem(value: Any) -> Optional[str]:
    """Returns why `value` is not a well-formed version token, or None.

    Policy: a non-empty string without surrounding whitespace.
    """
    if value is None:
        return "missing"
    if not isinstance(value, str):
        return f"expected a string, got {type(value).__name__}"
    if not value:
        return "empty"
    if value != value.strip():
        return "surrounding whitespace"
    return None


def blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()
