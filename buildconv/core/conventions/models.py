from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class EntryKind(str, Enum):
    PLUGIN = "PLUGIN"
    DEPENDENCY = "DEPENDENCY"
    FORMAT_RULE = "FORMAT_RULE"
    TEST_PLATFORM = "TEST_PLATFORM"
    REPOSITORY = "REPOSITORY"
    SCOPE_EXTENSION = "SCOPE_EXTENSION"


class Scope(str, Enum):
    """Visibility scope of a dependency."""

    COMPILE_ONLY = "COMPILE_ONLY"
    ANNOTATION_PROCESSING = "ANNOTATION_PROCESSING"
    TEST_IMPLEMENTATION = "TEST_IMPLEMENTATION"
    TEST_COMPILE_ONLY = "TEST_COMPILE_ONLY"
    TEST_RUNTIME_ONLY = "TEST_RUNTIME_ONLY"


class _Entry(BaseModel):
    # Subclasses provide `kind` and `coordinate` (field or property).
    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def key(self) -> Tuple[Any, ...]:
        # Two entries with the same key must carry identical parameters.
        return (self.kind, self.coordinate)

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class PluginEntry(_Entry):
    kind: Literal["PLUGIN"] = "PLUGIN"
    plugin_id: str
    version: Optional[str] = None

    @property
    def coordinate(self) -> str:
        return self.plugin_id


class DependencyEntry(_Entry):
    kind: Literal["DEPENDENCY"] = "DEPENDENCY"
    coordinate: str
    version: Optional[str] = None
    scope: Scope

    @property
    def key(self) -> Tuple[Any, ...]:
        return (self.kind, self.coordinate, self.scope)


class FormatRuleEntry(_Entry):
    kind: Literal["FORMAT_RULE"] = "FORMAT_RULE"
    formatter: str
    version: Optional[str] = None
    target: str = "java"

    @property
    def coordinate(self) -> str:
        return self.formatter

    @property
    def key(self) -> Tuple[Any, ...]:
        return (self.kind,)


class TestPlatformEntry(_Entry):
    __test__ = False  # keep pytest from collecting this class

    kind: Literal["TEST_PLATFORM"] = "TEST_PLATFORM"
    platform: str

    @property
    def coordinate(self) -> str:
        return self.platform

    @property
    def key(self) -> Tuple[Any, ...]:
        return (self.kind,)


class RepositoryEntry(_Entry):
    kind: Literal["REPOSITORY"] = "REPOSITORY"
    name: str
    url: Optional[str] = None

    @property
    def coordinate(self) -> str:
        return self.name


class ScopeExtensionEntry(_Entry):
    """`scope` sees every dependency declared in `extends_from`."""

    kind: Literal["SCOPE_EXTENSION"] = "SCOPE_EXTENSION"
    scope: Scope
    extends_from: Scope

    @property
    def coordinate(self) -> str:
        return f"{self.scope.value}->{self.extends_from.value}"


ConventionEntry = Annotated[
    Union[
        PluginEntry,
        DependencyEntry,
        FormatRuleEntry,
        TestPlatformEntry,
        RepositoryEntry,
        ScopeExtensionEntry,
    ],
    Field(discriminator="kind"),
]
