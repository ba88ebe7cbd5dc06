"""Identity model shared across the client."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class Identity(BaseModel):
    """Acting user as described by the claims of a bearer credential."""

    id: str
    roles: set[str] = Field(default_factory=set)
    email: str | None = None
    name: str | None = None
    claims: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id")
    @classmethod
    def _validate_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Identity id must not be empty.")
        return value

    def has_role(self, role: str) -> bool:
        """Return ``True`` if the identity carries the given role."""
        return role in self.roles
