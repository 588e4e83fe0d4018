from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Subunit(BaseModel):
    """One independently buildable component (a subproject) of the root."""

    model_config = ConfigDict(frozen=True)

    name: str
    group: str
    version: str

    @property
    def path(self) -> str:
        return f":{self.name}"

    def to_record(self) -> dict:
        return {"name": self.name, "group": self.group, "version": self.version}
