from __future__ import annotations

from typing import Any, Dict, Optional


class ConventionError(Exception):
    """Base class for declaration-time errors.

    All of them are fatal to the declaration phase and none are retryable.
    """

    def to_dict(self) -> Dict[str, Any]:
        return {"error": type(self).__name__, "detail": str(self)}


class DuplicateUnitError(ConventionError):
    def __init__(self, unit_name: str):
        self.unit_name = unit_name
        super().__init__(f"Subunit '{unit_name}' is already registered")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "unit": self.unit_name}


class InvalidUnitError(ConventionError, ValueError):
    def __init__(self, unit_name: str, parameter: str, reason: str):
        self.unit_name = unit_name
        self.parameter = parameter
        self.reason = reason
        super().__init__(f"Subunit '{unit_name}': invalid {parameter} ({reason})")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "unit": self.unit_name, "parameter": self.parameter}


class InvalidEntryError(ConventionError, ValueError):
    def __init__(self, kind: str, coordinate: Optional[str], parameter: str, reason: str):
        self.kind = kind
        self.coordinate = coordinate
        self.parameter = parameter
        self.reason = reason
        super().__init__(f"{kind} '{coordinate or '?'}': invalid {parameter} ({reason})")

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "kind": self.kind,
            "coordinate": self.coordinate,
            "parameter": self.parameter,
        }


class ConflictingEntryError(ConventionError):
    def __init__(self, kind: str, coordinate: str, parameter: str, existing: Any, requested: Any):
        self.kind = kind
        self.coordinate = coordinate
        self.parameter = parameter
        self.existing = existing
        self.requested = requested
        super().__init__(
            f"{kind} '{coordinate}': conflicting {parameter} "
            f"({existing!r} already declared, got {requested!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "kind": self.kind,
            "coordinate": self.coordinate,
            "parameter": self.parameter,
            "existing": self.existing,
            "requested": self.requested,
        }


class DeclarationClosedError(ConventionError):
    def __init__(self, what: str):
        self.what = what
        super().__init__(f"Declaration phase of the {what} is closed (already frozen)")


class DeclarationFormatError(ConventionError):
    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Malformed declaration {source}: {reason}")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "source": self.source}


class UnknownUnitError(ConventionError, KeyError):
    def __init__(self, unit_name: str):
        self.unit_name = unit_name
        super().__init__(unit_name)

    def __str__(self) -> str:
        return f"Subunit '{self.unit_name}' is not registered"

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "unit": self.unit_name}
