"""Access relationship models."""

from __future__ import annotations

from enum import StrEnum


class AccessRelationship(StrEnum):
    """How the acting identity relates to a document. Derived, never stored."""

    OWNER = "owner"
    SHARED_VIEW = "shared_view"
    SHARED_EDIT = "shared_edit"
    NO_ACCESS = "no_access"

    @property
    def is_shared(self) -> bool:
        return self in (AccessRelationship.SHARED_VIEW, AccessRelationship.SHARED_EDIT)

    @property
    def label(self) -> str:
        """Return the label shown in the access column."""
        return _LABELS[self]


_LABELS = {
    AccessRelationship.OWNER: "Owner",
    AccessRelationship.SHARED_VIEW: "View",
    AccessRelationship.SHARED_EDIT: "Edit",
    AccessRelationship.NO_ACCESS: "No Access",
}


class DocumentAction(StrEnum):
    """Actions a user can trigger on a document."""

    DOWNLOAD = "download"
    SHARE = "share"
    DELETE = "delete"
