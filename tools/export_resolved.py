from __future__ import annotations

import argparse
import json
import os
from pathlib import Path
import sys

# ---- sys.path bootstrap (Windows-friendly) ----
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
# ---------------------------------------------

from buildconv.core.declaration import export_resolved, load_declaration  # noqa: E402
from buildconv.core.errors import ConventionError  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Resolve a convention declaration and export it per subunit")
    ap.add_argument("--declaration", default=None, help="Declaration file (default: $BUILDCONV_DECLARATION_FILE or builtin)")
    ap.add_argument(
        "--out",
        default=os.getenv("BUILDCONV_EXPORT_DIR") or "build/resolved",
        help="Output directory (default build/resolved)",
    )
    ap.add_argument("--print", dest="print_json", action="store_true", help="Also print resolved JSON to stdout")
    args = ap.parse_args(argv)

    try:
        root = load_declaration(Path(args.declaration) if args.declaration else None)
        result = root.resolve()
        written = export_resolved(result, Path(args.out))
    except (ConventionError, FileNotFoundError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    if args.print_json:
        print(json.dumps(result.to_dict(), indent=2))

    print(f"Wrote {len(written)} resolved configuration(s) fingerprint={result.conventions_fingerprint}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
