from __future__ import annotations

from pydantic import BaseModel

from issue_ledger.model.identity import name_prefix


class Component(BaseModel):
    """A named grouping of issues within a project."""

    name: str

    def name_prefix(self) -> str:
        return name_prefix(self.name)
