from __future__ import annotations

import logging
import threading
from typing import Optional

from buildconv.core.declaration import load_declaration
from buildconv.core.root import RootProject

log = logging.getLogger("buildconv.api")

_LOCK = threading.Lock()
_ROOT: Optional[RootProject] = None


def get_root_project() -> RootProject:
    """Declaration is loaded and frozen once; afterwards readers share it lock-free."""
    global _ROOT
    root = _ROOT
    if root is not None:
        return root
    with _LOCK:
        if _ROOT is None:
            loaded = load_declaration()
            loaded.resolve()
            _ROOT = loaded
            log.info("serving conventions fingerprint=%s", loaded.conventions_fingerprint)
        return _ROOT


def reset_root_project() -> None:
    """
    Test helper: drops the loaded declaration so the next request reloads it
    (e.g. after BUILDCONV_DECLARATION_FILE changed).
    """
    global _ROOT
    with _LOCK:
        _ROOT = None
