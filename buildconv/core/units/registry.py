from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional, Tuple, Union

from buildconv.core.errors import DeclarationClosedError, DuplicateUnitError, InvalidUnitError
from buildconv.core.tokens import blank, version_problem

from .models import Subunit

log = logging.getLogger("buildconv.units")

# ":" separates project paths; "/" and "\\" would escape export directories.
_NAME_SEPARATORS = (":", "/", "\\")


class UnitRegistry:
    """Append-only set of subunits participating in propagation.

    Declaration order is kept so that everything derived from the registry
    is deterministic. Once frozen, the registry is safe to share between
    readers without locking.
    """

    def __init__(self) -> None:
        self._units: Dict[str, Subunit] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, subunit: Subunit) -> Subunit:
        if self._frozen:
            raise DeclarationClosedError("unit registry")

        name = subunit.name
        if blank(name) or name != name.strip():
            raise InvalidUnitError(name, "name", "empty or surrounded by whitespace")
        if any(sep in name for sep in _NAME_SEPARATORS) or name in (".", ".."):
            raise InvalidUnitError(name, "name", "path separators and relative segments are not allowed")
        if blank(subunit.group):
            raise InvalidUnitError(name, "group", "empty")
        problem = version_problem(subunit.version)
        if problem:
            raise InvalidUnitError(name, "version", problem)
        if name in self._units:
            raise DuplicateUnitError(name)

        self._units[name] = subunit
        log.debug("registered subunit %s (%s:%s)", subunit.path, subunit.group, subunit.version)
        return subunit

    def list(self) -> Tuple[Subunit, ...]:
        return tuple(self._units.values())

    def get(self, name: str) -> Optional[Subunit]:
        return self._units.get(name)

    def freeze(self) -> None:
        if not self._frozen:
            self._frozen = True
            log.debug("unit registry frozen with %d subunit(s)", len(self._units))

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[Subunit]:
        return iter(self.list())

    def __contains__(self, item: Union[str, Subunit]) -> bool:
        name = item.name if isinstance(item, Subunit) else item
        return name in self._units
