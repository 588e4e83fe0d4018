from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from buildconv.core.conventions.models import (
    ConventionEntry,
    DependencyEntry,
    FormatRuleEntry,
    PluginEntry,
    RepositoryEntry,
    Scope,
    TestPlatformEntry,
)
from buildconv.core.conventions.table import FrozenConventionTable
from buildconv.core.observability.metrics import record_propagation
from buildconv.core.units.registry import UnitRegistry

from .resolved import DependencyTriple, FormatRule, PropagationResult, ResolvedConfiguration

log = logging.getLogger("buildconv.propagation")


def _materialize(entries: Tuple[ConventionEntry, ...]) -> dict:
    plugins: List[str] = []
    dependencies: List[DependencyTriple] = []
    repositories: List[RepositoryEntry] = []
    format_rule: Optional[FormatRule] = None
    test_platform: Optional[str] = None

    for e in entries:
        if isinstance(e, PluginEntry):
            plugins.append(e.plugin_id)
        elif isinstance(e, DependencyEntry):
            dependencies.append(DependencyTriple(coordinate=e.coordinate, version=e.version, scope=e.scope))
        elif isinstance(e, FormatRuleEntry):
            format_rule = FormatRule(formatter=e.formatter, version=e.version, target=e.target)
        elif isinstance(e, TestPlatformEntry):
            test_platform = e.platform
        elif isinstance(e, RepositoryEntry):
            repositories.append(e)

    return {
        "plugins": tuple(plugins),
        "dependencies": tuple(dependencies),
        "repositories": tuple(repositories),
        "format_rule": format_rule,
        "test_platform": test_platform,
    }


def propagate(
    registry: UnitRegistry,
    table: FrozenConventionTable,
    *,
    source_compatibility: Optional[str] = None,
) -> PropagationResult:
    """Stamps every registered subunit with every convention entry.

    Deterministic for unchanged inputs and total: each subunit in
    `registry.list()` gets one ResolvedConfiguration carrying all of
    `table.entries()`. Subunits cannot opt out. `source_compatibility` is the
    root's Java language level and is stamped on every configuration as is.
    """
    entries = table.entries()
    shared = _materialize(entries)
    closure = tuple((s, table.effective_scopes(s)) for s in Scope)

    configurations = tuple(
        ResolvedConfiguration(
            unit=unit,
            entries=entries,
            conventions_fingerprint=table.fingerprint,
            scope_closure=closure,
            source_compatibility=source_compatibility,
            **shared,
        )
        for unit in registry.list()
    )

    record_propagation(len(configurations))
    log.info(
        "propagated %d convention entries to %d subunit(s) fingerprint=%s",
        len(entries),
        len(configurations),
        table.fingerprint,
    )
    return PropagationResult(configurations=configurations, conventions_fingerprint=table.fingerprint)
