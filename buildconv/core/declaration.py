"""
Declaration files: the persisted form of a root configuration.

A declaration is an ordered list of typed records, enough to rebuild
identical resolved configurations on reload. YAML or JSON:

    root: {name: demo, group: com.wck, version: 0.0.1-SNAPSHOT, source_compatibility: "17"}
    properties: {junitVersion: 5.9.2}
    units:
      - {name: spring-web}
    conventions:
      - {kind: PLUGIN, plugin_id: java}
      - {kind: DEPENDENCY, coordinate: "org.junit.jupiter:junit-jupiter-api",
         version: "${junitVersion}", scope: TEST_IMPLEMENTATION}

Scalars (names, groups, versions, property values) must be strings:
quote versions such as "1.10" that YAML would otherwise read as numbers.

Environment variable:
    BUILDCONV_DECLARATION_FILE: path to the declaration (optional).
    Default search path: <project_root>/conventions.yaml; when absent the
    builtin declaration is used.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import TypeAdapter, ValidationError

from buildconv.core.conventions.models import ConventionEntry
from buildconv.core.errors import DeclarationFormatError, InvalidEntryError, InvalidUnitError
from buildconv.core.propagation.resolved import PropagationResult
from buildconv.core.root import RootProject, builtin_root_project

_log = logging.getLogger("buildconv.declaration")

_ENTRY_ADAPTER: TypeAdapter = TypeAdapter(ConventionEntry)

DECLARATION_VERSION = 1


def entry_from_record(record: Any, *, index: Optional[int] = None) -> ConventionEntry:
    """Parse one typed record; schema problems become InvalidEntryError."""
    where = f"#{index}" if index is not None else None
    if not isinstance(record, dict):
        raise InvalidEntryError("UNKNOWN", where, "record", f"expected a mapping, got {type(record).__name__}")

    try:
        return _ENTRY_ADAPTER.validate_python(record)
    except ValidationError as exc:
        kind = str(record.get("kind") or "UNKNOWN")
        coordinate = (
            record.get("coordinate")
            or record.get("plugin_id")
            or record.get("formatter")
            or record.get("platform")
            or record.get("name")
            or where
        )
        err = exc.errors()[0]
        loc = [str(x) for x in err.get("loc", ()) if str(x) != kind]
        parameter = ".".join(loc) or "kind"
        raise InvalidEntryError(kind, coordinate, parameter, err.get("msg", "invalid")) from exc


def _text(value: Any, source: str, field: str) -> Optional[str]:
    # Declaration scalars are strings; an unquoted YAML 1.10 arrives as the float 1.1.
    if value is None or isinstance(value, str):
        return value
    raise DeclarationFormatError(source, f"{field} must be a string, got {type(value).__name__}")


def root_project_from_dict(data: Any, *, source: str = "<dict>") -> RootProject:
    """Builds a RootProject in declaration order; fails fast on the first error."""
    if not isinstance(data, dict):
        raise DeclarationFormatError(source, f"expected a mapping, got {type(data).__name__}")

    root_cfg = data.get("root") or {}
    properties = data.get("properties") or {}
    units = data.get("units") or []
    conventions = data.get("conventions") or []

    if not isinstance(root_cfg, dict):
        raise DeclarationFormatError(source, "'root' must be a mapping")
    if not isinstance(properties, dict):
        raise DeclarationFormatError(source, "'properties' must be a mapping")
    if not isinstance(units, list):
        raise DeclarationFormatError(source, "'units' must be a list")
    if not isinstance(conventions, list):
        raise DeclarationFormatError(source, "'conventions' must be a list")

    kwargs: Dict[str, Any] = {}
    for key in ("group", "version", "source_compatibility"):
        value = _text(root_cfg.get(key), source, f"root.{key}")
        if value is not None:
            kwargs[key] = value
    for k, v in properties.items():
        _text(k, source, "properties key")
        if _text(v, source, f"properties.{k}") is None:
            raise DeclarationFormatError(source, f"properties.{k} has no value")
    root = RootProject(
        _text(root_cfg.get("name"), source, "root.name") or "root",
        properties=properties,
        **kwargs,
    )

    for i, u in enumerate(units):
        if isinstance(u, str):
            u = {"name": u}
        if not isinstance(u, dict):
            raise DeclarationFormatError(source, f"units[{i}] must be a name or a mapping with 'name'")
        name = _text(u.get("name"), source, f"units[{i}].name")
        if name is None:
            raise DeclarationFormatError(source, f"units[{i}].name is required")
        root.subproject(
            name,
            group=_text(u.get("group"), source, f"units[{i}].group"),
            version=_text(u.get("version"), source, f"units[{i}].version"),
        )

    for i, record in enumerate(conventions):
        root.declare(entry_from_record(record, index=i))

    _log.info(
        "Loaded declaration %s: %d subunit(s), %d convention entries",
        source,
        len(root.registry),
        len(root.table),
    )
    return root


def _parse_text(raw_text: str, source: str) -> Any:
    # JSON first, YAML as fallback (flat JSON is valid YAML but parses faster)
    try:
        return json.loads(raw_text)
    except json.JSONDecodeError:
        pass
    try:
        return yaml.safe_load(raw_text)
    except yaml.YAMLError as exc:
        raise DeclarationFormatError(source, f"neither JSON nor YAML: {exc}") from exc


def load_declaration(path: Optional[Path] = None) -> RootProject:
    """
    Load a root configuration from a declaration file.

    Falls back to the builtin declaration only when no path was given
    explicitly (argument or env var) and the default file is absent.
    """
    resolved, explicit = _resolve_path(path)
    if not resolved.exists():
        if explicit:
            raise FileNotFoundError(f"Declaration file not found: {resolved}")
        _log.info("No declaration at %s; using builtin conventions", resolved)
        return builtin_root_project()

    raw_text = resolved.read_text(encoding="utf-8")
    return root_project_from_dict(_parse_text(raw_text, str(resolved)), source=str(resolved))


def dump_declaration(root: RootProject) -> Dict[str, Any]:
    """Ordered typed records of a root configuration (versions substituted)."""
    root_cfg = {"name": root.name, "group": root.group, "version": root.version}
    if root.source_compatibility is not None:
        root_cfg["source_compatibility"] = root.source_compatibility
    return {
        "declaration_version": DECLARATION_VERSION,
        "root": root_cfg,
        "properties": dict(root.table.properties),
        "units": [u.to_record() for u in root.registry.list()],
        "conventions": [e.to_record() for e in root.table.entries()],
    }


def write_declaration(root: RootProject, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = dump_declaration(root)
    if path.suffix.lower() in (".yaml", ".yml"):
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    else:
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def export_resolved(result: PropagationResult, out_dir: Path) -> List[Path]:
    """
    Write one resolved.json per subunit:
      <out_dir>/<unit>/.buildconv/resolved.json

    Every target must resolve under out_dir; nothing is written otherwise.
    """
    out_dir = Path(out_dir)
    base = out_dir.resolve()
    targets = []
    for rc in result:
        d = out_dir / rc.unit.name / ".buildconv"
        if base not in d.resolve().parents:
            raise InvalidUnitError(rc.unit.name, "name", f"export target escapes {out_dir}")
        targets.append((rc, d))

    written: List[Path] = []
    for rc, d in targets:
        d.mkdir(parents=True, exist_ok=True)
        p = d / "resolved.json"
        p.write_text(json.dumps(rc.to_dict(), indent=2, sort_keys=True), encoding="utf-8")
        written.append(p)
    _log.info("Exported %d resolved configuration(s) to %s", len(written), out_dir)
    return written


def _resolve_path(path: Optional[Path]) -> Tuple[Path, bool]:
    """Determine the declaration path from argument or env var or default."""
    if path is not None:
        return Path(path), True
    env_path = os.getenv("BUILDCONV_DECLARATION_FILE", "").strip()
    if env_path:
        return Path(env_path), True
    # Default: project root / conventions.yaml
    project_root = Path(__file__).resolve().parents[2]
    return project_root / "conventions.yaml", False
