"""Interface for the remote document store."""

from abc import ABC, abstractmethod

from secureshare_client_lib.documents.models import (
    AuditEntry,
    DirectoryUser,
    Document,
    RegistrationRequest,
    ShareGrant,
)


class DocumentStore(ABC):
    """Authoritative store of documents, shares, users and audit entries.

    Implementations raise :class:`~secureshare_client_lib.errors.UnauthorizedError`
    on 401/403, :class:`~secureshare_client_lib.errors.ProtocolError` on malformed
    responses and :class:`~secureshare_client_lib.errors.NetworkFailureError` on
    connection failures or timeouts.
    """

    @abstractmethod
    async def list_documents(self) -> list[Document]:
        """Return all documents visible to the caller."""

    @abstractmethod
    async def upload_document(self, filename: str, content: bytes, content_type: str | None = None) -> Document:
        """Upload a file and return the canonical record created by the store."""

    @abstractmethod
    async def delete_document(self, document_id: str) -> None:
        """Delete a document."""

    @abstractmethod
    async def download_document(self, document_id: str) -> bytes:
        """Return the content of a document."""

    @abstractmethod
    async def share_document(self, document_id: str, grant: ShareGrant, message: str = "") -> None:
        """Grant access to a document."""

    @abstractmethod
    async def resolve_user(self, email: str) -> DirectoryUser | None:
        """Look a user up by email; ``None`` if nobody matches."""

    @abstractmethod
    async def list_audit_entries(self) -> list[AuditEntry]:
        """Return the audit trail. Admin only on the server side."""

    @abstractmethod
    async def register_user(self, request: RegistrationRequest) -> None:
        """Create an account. Does not require a credential."""
