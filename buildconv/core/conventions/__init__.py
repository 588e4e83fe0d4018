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
from .table import ConventionTable, FrozenConventionTable
from .builtins import builtin_conventions, builtin_properties

__all__ = [
    "ConventionEntry",
    "DependencyEntry",
    "EntryKind",
    "FormatRuleEntry",
    "PluginEntry",
    "RepositoryEntry",
    "Scope",
    "ScopeExtensionEntry",
    "TestPlatformEntry",
    "ConventionTable",
    "FrozenConventionTable",
    "builtin_conventions",
    "builtin_properties",
]
