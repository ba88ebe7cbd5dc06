"""Documents package."""

from secureshare_client_lib.documents.models import (
    AccessLevel,
    AuditActor,
    AuditEntry,
    DirectoryUser,
    Document,
    DocumentOwner,
    RegistrationRequest,
    ShareEntry,
    ShareGrant,
    ShareGrantRequest,
)
from secureshare_client_lib.documents.normalization import (
    normalize_audit_entries,
    normalize_audit_entry,
    normalize_directory_user,
    normalize_document,
    normalize_documents,
)

__all__ = [
    "AccessLevel",
    "AuditActor",
    "AuditEntry",
    "DirectoryUser",
    "Document",
    "DocumentOwner",
    "RegistrationRequest",
    "ShareEntry",
    "ShareGrant",
    "ShareGrantRequest",
    "normalize_audit_entries",
    "normalize_audit_entry",
    "normalize_directory_user",
    "normalize_document",
    "normalize_documents",
]
