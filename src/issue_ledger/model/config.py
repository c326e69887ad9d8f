from __future__ import annotations

from pydantic import BaseModel


class Config(BaseModel):
    """The local user's identity, used as the actor for logged changes."""

    name: str
    email: str

    def user(self) -> str:
        return f"{self.name} <{self.email}>"
