from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple, Union

from buildconv.core.conventions.models import ConventionEntry, RepositoryEntry, Scope
from buildconv.core.errors import UnknownUnitError
from buildconv.core.units.models import Subunit

UnitRef = Union[str, Subunit]


@dataclass(frozen=True)
class DependencyTriple:
    coordinate: str
    version: str
    scope: Scope

    def to_dict(self) -> Dict[str, str]:
        return {"coordinate": self.coordinate, "version": self.version, "scope": self.scope.value}


@dataclass(frozen=True)
class FormatRule:
    formatter: str
    version: str
    target: str = "java"

    def to_dict(self) -> Dict[str, str]:
        return {"formatter": self.formatter, "version": self.version, "target": self.target}


@dataclass(frozen=True)
class ResolvedConfiguration:
    """Final settings of one subunit, as read by the external toolchains.

    A value, never patched in place: a changed convention table means a new
    propagation run.
    """

    unit: Subunit
    entries: Tuple[ConventionEntry, ...]
    conventions_fingerprint: str
    plugins: Tuple[str, ...] = ()
    dependencies: Tuple[DependencyTriple, ...] = ()
    format_rule: Optional[FormatRule] = None
    test_platform: Optional[str] = None
    repositories: Tuple[RepositoryEntry, ...] = ()
    source_compatibility: Optional[str] = None
    # scope -> scopes it sees, itself first
    scope_closure: Tuple[Tuple[Scope, Tuple[Scope, ...]], ...] = field(default=(), repr=False)

    def dependencies_in(self, scope: Scope, *, effective: bool = False) -> Tuple[DependencyTriple, ...]:
        scope = Scope(scope)
        if not effective:
            return tuple(d for d in self.dependencies if d.scope == scope)

        scopes = dict(self.scope_closure).get(scope, (scope,))
        out = []
        seen = set()
        for s in scopes:
            for d in self.dependencies:
                if d.scope == s and d.coordinate not in seen:
                    seen.add(d.coordinate)
                    out.append(d)
        return tuple(out)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unit": self.unit.to_record(),
            "path": self.unit.path,
            "conventions_fingerprint": self.conventions_fingerprint,
            "plugins": list(self.plugins),
            "repositories": [r.to_record() for r in self.repositories],
            "dependencies": [d.to_dict() for d in self.dependencies],
            "scope_extensions": {
                s.value: [p.value for p in closure[1:]] for s, closure in self.scope_closure if len(closure) > 1
            },
            "format_rule": self.format_rule.to_dict() if self.format_rule else None,
            "test_platform": self.test_platform,
            "source_compatibility": self.source_compatibility,
        }


@dataclass(frozen=True)
class PropagationResult:
    """Resolved configurations of every subunit, in registry order."""

    configurations: Tuple[ResolvedConfiguration, ...]
    conventions_fingerprint: str

    def get(self, unit: UnitRef) -> ResolvedConfiguration:
        name = unit.name if isinstance(unit, Subunit) else unit
        for rc in self.configurations:
            if rc.unit.name == name:
                return rc
        raise UnknownUnitError(name)

    def plugins_for(self, unit: UnitRef) -> Tuple[str, ...]:
        return self.get(unit).plugins

    def dependencies_for(
        self,
        unit: UnitRef,
        scope: Optional[Scope] = None,
        *,
        effective: bool = False,
    ) -> Tuple[DependencyTriple, ...]:
        rc = self.get(unit)
        if scope is None:
            return rc.dependencies
        return rc.dependencies_in(scope, effective=effective)

    def format_rule_for(self, unit: UnitRef) -> Optional[FormatRule]:
        return self.get(unit).format_rule

    def test_platform_for(self, unit: UnitRef) -> Optional[str]:
        return self.get(unit).test_platform

    def repositories_for(self, unit: UnitRef) -> Tuple[RepositoryEntry, ...]:
        return self.get(unit).repositories

    def source_compatibility_for(self, unit: UnitRef) -> Optional[str]:
        return self.get(unit).source_compatibility

    def units(self) -> Tuple[Subunit, ...]:
        return tuple(rc.unit for rc in self.configurations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "conventions_fingerprint": self.conventions_fingerprint,
            "count": len(self.configurations),
            "configurations": [rc.to_dict() for rc in self.configurations],
        }

    def __len__(self) -> int:
        return len(self.configurations)

    def __iter__(self) -> Iterator[ResolvedConfiguration]:
        return iter(self.configurations)
