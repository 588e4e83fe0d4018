import dataclasses

import pytest

from buildconv.core.errors import UnknownUnitError
from buildconv.core.propagation import propagate


def test_unknown_unit_raises(registry_ab, scenario_table):
    result = propagate(registry_ab, scenario_table.freeze())
    with pytest.raises(UnknownUnitError) as ei:
        result.plugins_for("C")
    assert ei.value.unit_name == "C"
    # KeyError compatible for mapping-style callers
    assert isinstance(ei.value, KeyError)


def test_resolved_configuration_is_read_only(registry_ab, scenario_table):
    rc = propagate(registry_ab, scenario_table.freeze()).get("A")
    with pytest.raises(dataclasses.FrozenInstanceError):
        rc.plugins = ("other",)


def test_to_dict_shape(registry_ab, scenario_table):
    result = propagate(registry_ab, scenario_table.freeze())
    body = result.to_dict()

    assert body["count"] == 2
    first = body["configurations"][0]
    assert first["unit"] == {"name": "A", "group": "com.example", "version": "1.0.0"}
    assert first["path"] == ":A"
    assert first["plugins"] == ["p1"]
    assert first["dependencies"] == [{"coordinate": "lib:x", "version": "1.0", "scope": "COMPILE_ONLY"}]
    assert first["format_rule"] == {"formatter": "fmt", "version": "1.15.0", "target": "java"}
    assert first["test_platform"] == "junit5"
    assert first["conventions_fingerprint"] == body["conventions_fingerprint"]
