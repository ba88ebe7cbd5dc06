"""Document, share and audit domain models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class AccessLevel(StrEnum):
    """Permission tier attached to a share grant."""

    VIEW = "view"
    EDIT = "edit"


class DocumentOwner(BaseModel):
    """The single owner of a document."""

    id: str
    email: str | None = None
    name: str | None = None


class ShareEntry(BaseModel):
    """Access granted to one grantee on a document."""

    grantee_id: str
    access_level: AccessLevel


class Document(BaseModel):
    """Canonical document record as seen by the client."""

    id: str
    display_name: str = ""
    size_bytes: int | None = None
    mime_or_extension: str = "unknown"
    created_at: datetime | None = None
    owner: DocumentOwner
    shared_with: list[ShareEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_grantees(self) -> "Document":
        # One entry per grantee, last write wins; owners are never their own grantee.
        merged: dict[str, ShareEntry] = {}
        for entry in self.shared_with:
            if entry.grantee_id == self.owner.id:
                continue
            merged[entry.grantee_id] = entry
        if len(merged) != len(self.shared_with):
            self.shared_with = list(merged.values())
        return self

    def share_for(self, grantee_id: str) -> ShareEntry | None:
        """Return the share entry of the grantee, if any."""
        for entry in self.shared_with:
            if entry.grantee_id == grantee_id:
                return entry
        return None

    def with_share(self, grant: "ShareGrant") -> "Document":
        """Return a copy with the grant merged in, replacing any entry of the same grantee."""
        entries = [entry for entry in self.shared_with if entry.grantee_id != grant.grantee_id]
        entries.append(ShareEntry(grantee_id=grant.grantee_id, access_level=grant.access_level))
        return Document.model_validate({**self.model_dump(), "shared_with": [e.model_dump() for e in entries]})


class ShareGrantRequest(BaseModel):
    """Share request as entered by the user, before the recipient is resolved."""

    recipient_email: str
    access_level: AccessLevel = AccessLevel.VIEW
    message: str = ""


class ShareGrant(BaseModel):
    """Share request after the recipient has been resolved to a user id."""

    grantee_id: str
    access_level: AccessLevel


class DirectoryUser(BaseModel):
    """User returned by the directory lookup."""

    id: str
    email: str | None = None
    name: str | None = None


class AuditActor(BaseModel):
    """Who performed an audited action."""

    id: str | None = None
    email: str | None = None


class AuditEntry(BaseModel):
    """Read-only audit trail record."""

    id: str
    actor: AuditActor = Field(default_factory=AuditActor)
    action: str
    resource_ref: str = ""
    timestamp: datetime | None = None
    status: str | None = None
    detail_payload: dict[str, Any] = Field(default_factory=dict)


class RegistrationRequest(BaseModel):
    """Self-service account registration."""

    username: str
    email: str
    password: str
    first_name: str = ""
    last_name: str = ""
    roles: str = "user"

    def to_payload(self) -> dict[str, str]:
        """Return the JSON body expected by the registration endpoint."""
        return {
            "username": self.username,
            "email": self.email,
            "password": self.password,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "roles": self.roles or "user",
        }
