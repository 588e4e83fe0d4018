from __future__ import annotations

import hashlib
import json
import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from buildconv.core.errors import ConflictingEntryError, DeclarationClosedError, InvalidEntryError
from buildconv.core.tokens import PROPERTY_REF, blank, version_problem

from .models import (
    ConventionEntry,
    DependencyEntry,
    EntryKind,
    FormatRuleEntry,
    PluginEntry,
    RepositoryEntry,
    Scope,
    ScopeExtensionEntry,
    TestPlatformEntry,
)

log = logging.getLogger("buildconv.conventions")

# Only ConventionTable.freeze() holds this; a frozen table is always a validated one.
_FREEZE_TOKEN = object()

# Entry kinds whose `version` parameter is mandatory.
_VERSION_REQUIRED = {EntryKind.DEPENDENCY.value, EntryKind.FORMAT_RULE.value}

# Required non-blank identifier parameter per entry type.
_IDENTIFIER_PARAM = {
    PluginEntry: "plugin_id",
    DependencyEntry: "coordinate",
    FormatRuleEntry: "formatter",
    TestPlatformEntry: "platform",
    RepositoryEntry: "name",
}


def _scope_closure(scope: Scope, edges: Mapping[Scope, List[Scope]]) -> Tuple[Scope, ...]:
    """Breadth-first walk over scope extensions, `scope` first."""
    seen: List[Scope] = [scope]
    queue = [scope]
    while queue:
        current = queue.pop(0)
        for parent in edges.get(current, []):
            if parent not in seen:
                seen.append(parent)
                queue.append(parent)
    return tuple(seen)


class ConventionTable:
    """Ordered, validated rule set declared once by the root configuration.

    Every entry is checked when it is added, so a malformed convention fails
    before any subunit is touched. `freeze()` ends the declaration phase and
    returns the immutable table the propagation engine works on.
    """

    def __init__(self, properties: Optional[Mapping[str, str]] = None):
        self._entries: List[ConventionEntry] = []
        self._by_key: Dict[Tuple[Any, ...], ConventionEntry] = {}
        self._dependency_versions: Dict[str, str] = {}
        self._extensions: Dict[Scope, List[Scope]] = {}
        self._properties: Dict[str, str] = {}
        self._frozen: Optional[FrozenConventionTable] = None

        for name, value in (properties or {}).items():
            self.set_property(name, value)

    @property
    def properties(self) -> Mapping[str, str]:
        return MappingProxyType(self._properties)

    def set_property(self, name: str, value: str) -> None:
        self._ensure_open()
        if blank(name):
            raise InvalidEntryError("PROPERTY", name, "name", "empty")
        problem = version_problem(value)
        if problem:
            raise InvalidEntryError("PROPERTY", name, "value", problem)
        existing = self._properties.get(name)
        if existing is not None and existing != value:
            raise ConflictingEntryError("PROPERTY", name, "value", existing, value)
        self._properties[name] = value

    def add_entry(self, entry: ConventionEntry) -> ConventionEntry:
        self._ensure_open()
        entry = self._validated(entry)

        existing = self._by_key.get(entry.key)
        if existing is not None:
            if existing.to_record() == entry.to_record():
                log.debug("ignoring repeated %s entry %s", entry.kind, entry.coordinate)
                return existing
            self._raise_conflict(existing, entry)

        if isinstance(entry, DependencyEntry):
            pinned = self._dependency_versions.get(entry.coordinate)
            if pinned is not None and pinned != entry.version:
                raise ConflictingEntryError(entry.kind, entry.coordinate, "version", pinned, entry.version)
            self._dependency_versions[entry.coordinate] = entry.version
        elif isinstance(entry, ScopeExtensionEntry):
            self._extensions.setdefault(entry.scope, []).append(entry.extends_from)

        self._entries.append(entry)
        self._by_key[entry.key] = entry
        log.debug("declared %s entry %s", entry.kind, entry.coordinate)
        return entry

    def entries(self) -> Tuple[ConventionEntry, ...]:
        return tuple(self._entries)

    def freeze(self) -> FrozenConventionTable:
        if self._frozen is None:
            self._frozen = FrozenConventionTable(self.entries(), dict(self._properties), _token=_FREEZE_TOKEN)
            log.info(
                "convention table frozen: %d entries fingerprint=%s",
                len(self._entries),
                self._frozen.fingerprint,
            )
        return self._frozen

    def __len__(self) -> int:
        return len(self._entries)

    # --- internals ---

    def _ensure_open(self) -> None:
        if self._frozen is not None:
            raise DeclarationClosedError("convention table")

    def _validated(self, entry: ConventionEntry) -> ConventionEntry:
        kind = entry.kind

        param = _IDENTIFIER_PARAM.get(type(entry))
        if param is not None:
            value = getattr(entry, param)
            if blank(value):
                raise InvalidEntryError(kind, value, param, "missing or empty")
            if value != value.strip():
                raise InvalidEntryError(kind, value, param, "surrounding whitespace")

        if isinstance(entry, (PluginEntry, DependencyEntry, FormatRuleEntry)):
            version = entry.version
            if version is None and kind not in _VERSION_REQUIRED:
                return entry
            version = self._substitute(entry, version)
            problem = version_problem(version)
            if problem:
                raise InvalidEntryError(kind, entry.coordinate, "version", problem)
            if version != entry.version:
                entry = entry.model_copy(update={"version": version})

        if isinstance(entry, ScopeExtensionEntry):
            if entry.scope == entry.extends_from:
                raise InvalidEntryError(kind, entry.coordinate, "extends_from", "a scope cannot extend itself")
            if entry.scope in _scope_closure(entry.extends_from, self._extensions):
                raise InvalidEntryError(kind, entry.coordinate, "extends_from", "cyclic scope extension")

        return entry

    def _substitute(self, entry: ConventionEntry, version: Optional[str]) -> Optional[str]:
        if not isinstance(version, str):
            return version
        m = PROPERTY_REF.match(version)
        if m is None:
            return version
        name = m.group(1)
        if name not in self._properties:
            raise InvalidEntryError(entry.kind, entry.coordinate, "version", f"undefined property '{name}'")
        return self._properties[name]

    @staticmethod
    def _raise_conflict(existing: ConventionEntry, requested: ConventionEntry) -> None:
        old = existing.to_record()
        new = requested.to_record()
        for param in sorted(set(old) | set(new)):
            if old.get(param) != new.get(param):
                raise ConflictingEntryError(
                    requested.kind, existing.coordinate, param, old.get(param), new.get(param)
                )


class FrozenConventionTable:
    """Validated, immutable convention table.

    Obtained from `ConventionTable.freeze()`; this is the only table type the
    propagation engine accepts. Direct construction raises TypeError.
    """

    def __init__(
        self,
        entries: Tuple[ConventionEntry, ...],
        properties: Dict[str, str],
        *,
        _token: object = None,
    ):
        if _token is not _FREEZE_TOKEN:
            raise TypeError("FrozenConventionTable is created by ConventionTable.freeze()")
        self._entries = tuple(entries)
        self._properties = MappingProxyType(dict(properties))
        self._extensions: Dict[Scope, List[Scope]] = {}
        for e in self._entries:
            if isinstance(e, ScopeExtensionEntry):
                self._extensions.setdefault(e.scope, []).append(e.extends_from)
        self._fingerprint = self._compute_fingerprint()

    @property
    def properties(self) -> Mapping[str, str]:
        return self._properties

    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    def entries(self) -> Tuple[ConventionEntry, ...]:
        return self._entries

    def records(self) -> List[Dict[str, Any]]:
        return [e.to_record() for e in self._entries]

    def effective_scopes(self, scope: Scope) -> Tuple[Scope, ...]:
        return _scope_closure(Scope(scope), self._extensions)

    def __len__(self) -> int:
        return len(self._entries)

    def _compute_fingerprint(self) -> str:
        raw = json.dumps(self.records(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16]
