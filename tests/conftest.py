import pytest
from fastapi.testclient import TestClient

from buildconv.api.main import app
from buildconv.api.provider import reset_root_project
from buildconv.core.conventions.models import (
    DependencyEntry,
    FormatRuleEntry,
    PluginEntry,
    Scope,
    TestPlatformEntry,
)
from buildconv.core.conventions.table import ConventionTable
from buildconv.core.observability.metrics import reset_metrics
from buildconv.core.units.models import Subunit
from buildconv.core.units.registry import UnitRegistry


@pytest.fixture(autouse=True)
def _isolated_declaration(monkeypatch):
    # Serve the builtin declaration unless a test points somewhere else
    monkeypatch.delenv("BUILDCONV_DECLARATION_FILE", raising=False)
    reset_root_project()
    reset_metrics()
    yield
    reset_root_project()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def registry_ab():
    reg = UnitRegistry()
    reg.register(Subunit(name="A", group="com.example", version="1.0.0"))
    reg.register(Subunit(name="B", group="com.example", version="1.0.0"))
    return reg


@pytest.fixture()
def scenario_table():
    table = ConventionTable()
    table.add_entry(PluginEntry(plugin_id="p1"))
    table.add_entry(DependencyEntry(coordinate="lib:x", version="1.0", scope=Scope.COMPILE_ONLY))
    table.add_entry(FormatRuleEntry(formatter="fmt", version="1.15.0"))
    table.add_entry(TestPlatformEntry(platform="junit5"))
    return table


@pytest.fixture()
def declaration_dict():
    return {
        "root": {"name": "demo", "group": "org.demo", "version": "2.0.0"},
        "properties": {"junitVersion": "5.9.2"},
        "units": ["core", {"name": "web", "version": "2.1.0"}],
        "conventions": [
            {"kind": "PLUGIN", "plugin_id": "java"},
            {"kind": "REPOSITORY", "name": "mavenCentral"},
            {
                "kind": "DEPENDENCY",
                "coordinate": "org.junit.jupiter:junit-jupiter-api",
                "version": "${junitVersion}",
                "scope": "TEST_IMPLEMENTATION",
            },
            {"kind": "FORMAT_RULE", "formatter": "google-java-format", "version": "1.15.0"},
            {"kind": "TEST_PLATFORM", "platform": "junit-platform"},
        ],
    }
