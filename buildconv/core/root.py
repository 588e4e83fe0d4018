from __future__ import annotations

import logging
import threading
from typing import Mapping, Optional

from buildconv.core.conventions.builtins import (
    DEFAULT_GROUP,
    DEFAULT_UNITS,
    DEFAULT_VERSION,
    JAVA_VERSION,
    builtin_conventions,
    builtin_properties,
)
from buildconv.core.conventions.models import ConventionEntry
from buildconv.core.conventions.table import ConventionTable, FrozenConventionTable
from buildconv.core.errors import InvalidEntryError
from buildconv.core.propagation.engine import propagate
from buildconv.core.propagation.resolved import PropagationResult
from buildconv.core.tokens import version_problem
from buildconv.core.units.models import Subunit
from buildconv.core.units.registry import UnitRegistry

log = logging.getLogger("buildconv.root")


class RootProject:
    """Root configuration: exclusive owner of the unit registry and the
    convention table.

    Declaration happens through `subproject()`, `set_property()` and
    `declare()`; `freeze()` closes both collections, after which the
    resolved configurations are computed once and shared by all readers.
    """

    def __init__(
        self,
        name: str = "root",
        *,
        group: str = DEFAULT_GROUP,
        version: str = DEFAULT_VERSION,
        properties: Optional[Mapping[str, str]] = None,
        source_compatibility: Optional[str] = None,
    ):
        if source_compatibility is not None:
            problem = version_problem(source_compatibility)
            if problem:
                raise InvalidEntryError("ROOT", name, "source_compatibility", problem)
        self.name = name
        self.group = group
        self.version = version
        # Java language level every subunit compiles against, or None to leave it unset.
        self.source_compatibility = source_compatibility
        self.registry = UnitRegistry()
        self.table = ConventionTable(properties=properties)
        self._frozen_table: Optional[FrozenConventionTable] = None
        self._resolution: Optional[PropagationResult] = None
        self._lock = threading.Lock()

    # --- declaration phase ---

    def subproject(self, name: str, *, group: Optional[str] = None, version: Optional[str] = None) -> Subunit:
        unit = Subunit(
            name=name,
            group=self.group if group is None else group,
            version=self.version if version is None else version,
        )
        return self.registry.register(unit)

    def set_property(self, name: str, value: str) -> None:
        self.table.set_property(name, value)

    def declare(self, entry: ConventionEntry) -> ConventionEntry:
        return self.table.add_entry(entry)

    def freeze(self) -> FrozenConventionTable:
        with self._lock:
            if self._frozen_table is None:
                self.registry.freeze()
                self._frozen_table = self.table.freeze()
            return self._frozen_table

    @property
    def frozen(self) -> bool:
        return self._frozen_table is not None

    # --- read phase ---

    @property
    def conventions_fingerprint(self) -> str:
        return self.freeze().fingerprint

    def resolve(self) -> PropagationResult:
        table = self.freeze()
        with self._lock:
            if self._resolution is None:
                self._resolution = propagate(self.registry, table, source_compatibility=self.source_compatibility)
            return self._resolution


def builtin_root_project(units=DEFAULT_UNITS) -> RootProject:
    """The multi-module Spring build whose conventions ship with the package."""
    root = RootProject(
        "spring-multimodule",
        properties=builtin_properties(),
        source_compatibility=JAVA_VERSION,
    )
    for name in units:
        root.subproject(name)
    for entry in builtin_conventions():
        root.declare(entry)
    log.debug("builtin root project declared with %d subunit(s)", len(root.registry))
    return root
