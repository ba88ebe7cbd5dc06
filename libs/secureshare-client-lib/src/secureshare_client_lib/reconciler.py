"""Reconcile the local document collection with the remote store."""

from __future__ import annotations

import logging
from typing import Any, Callable

from secureshare_client_lib.access.partitioner import DocumentPartition, partition
from secureshare_client_lib.documents.models import Document, ShareGrant
from secureshare_client_lib.errors import (
    NetworkFailureError,
    NoCredentialError,
    ProtocolError,
    RequestRejectedError,
    UnauthorizedError,
)
from secureshare_client_lib.identity import Identity
from secureshare_client_lib.session import SessionContext
from secureshare_client_lib.store.document_store import DocumentStore

logger = logging.getLogger(__name__)

RETRY_NOTICE = "Could not load your documents. Please try again."

_SESSION_ERRORS = (UnauthorizedError, NoCredentialError)

# Marks "use the session's identity"; ``None`` means no identity.
_SESSION_IDENTITY: Any = object()

DocumentsListener = Callable[[tuple[Document, ...]], None]


class DocumentReconciler:
    """Single owner of the client-local document collection.

    Every mutation notifies subscribers so derived views (partitions) are
    recomputed before the next render.
    """

    def __init__(self, store: DocumentStore, session: SessionContext):
        self._store = store
        self._session = session
        self._documents: list[Document] = []
        self._listeners: list[DocumentsListener] = []
        self.notice: str | None = None

    @property
    def documents(self) -> tuple[Document, ...]:
        return tuple(self._documents)

    def subscribe(self, listener: DocumentsListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: DocumentsListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def partition(self, identity: Identity | None = _SESSION_IDENTITY) -> DocumentPartition:
        """Partition the current collection for ``identity`` (defaults to the session's).

        Passing ``None`` explicitly yields the empty no-identity view.
        """
        if identity is _SESSION_IDENTITY:
            identity = self._session.identity
        return partition(identity, self._documents)

    def _replace(self, documents: list[Document]) -> None:
        self._documents = list(documents)
        self._notify()

    def _notify(self) -> None:
        snapshot = self.documents
        for listener in list(self._listeners):
            listener(snapshot)

    def _index_of(self, document_id: str) -> int | None:
        for index, document in enumerate(self._documents):
            if document.id == document_id:
                return index
        return None

    def _handle_unauthorized(self, exc: UnauthorizedError | NoCredentialError) -> None:
        logger.warning("Authorization failed (%s); ending session", exc)
        self._replace([])
        self._session.logout("unauthorized")

    async def refresh(self) -> tuple[Document, ...]:
        """Replace the local collection with a fresh fetch."""
        try:
            documents = await self._store.list_documents()
        except _SESSION_ERRORS as exc:
            self._handle_unauthorized(exc)
            raise
        except (ProtocolError, NetworkFailureError, RequestRejectedError) as exc:
            # Unknown state: show nothing rather than stale, still actionable rows.
            logger.warning("Fetching documents failed: %s", exc)
            self.notice = RETRY_NOTICE
            self._replace([])
            raise

        self.notice = None
        self._replace(documents)
        logger.debug("Fetched %d documents", len(documents))
        return self.documents

    def apply_upload(self, document: Document) -> None:
        """Prepend a freshly uploaded document; the store already returned the canonical record."""
        self._documents = [document] + [existing for existing in self._documents if existing.id != document.id]
        self._notify()

    async def upload(self, filename: str, content: bytes, content_type: str | None = None) -> Document:
        try:
            document = await self._store.upload_document(filename, content, content_type)
        except _SESSION_ERRORS as exc:
            self._handle_unauthorized(exc)
            raise
        self.apply_upload(document)
        return document

    async def apply_delete(self, document_id: str) -> None:
        """Remove a document optimistically, delete it remotely, then refetch.

        On a failed delete the document is restored at its former position and
        the error is raised. Once the delete is committed, a failing refetch is
        not raised; it leaves the collection empty with ``notice`` set, as
        :meth:`refresh` does. An expired session is always raised.
        """
        index = self._index_of(document_id)
        removed = self._documents.pop(index) if index is not None else None
        if removed is not None:
            self._notify()

        try:
            await self._store.delete_document(document_id)
        except _SESSION_ERRORS as exc:
            self._handle_unauthorized(exc)
            raise
        except (ProtocolError, NetworkFailureError, RequestRejectedError):
            if removed is not None and self._index_of(document_id) is None:
                logger.warning("Deleting document %s failed; restoring it", document_id)
                self._documents.insert(min(index, len(self._documents)), removed)
                self._notify()
            raise

        try:
            await self.refresh()
        except (ProtocolError, NetworkFailureError, RequestRejectedError):
            logger.warning("Document %s was deleted but refetching failed", document_id)

    async def apply_share_success(self) -> tuple[Document, ...]:
        """Refetch after a successful share; grantee ids are only known server-side."""
        return await self.refresh()

    def apply_share_grant(self, document_id: str, grant: ShareGrant) -> Document:
        """Merge a grant locally, replacing any existing entry for the same grantee."""
        index = self._index_of(document_id)
        if index is None:
            raise KeyError(document_id)
        updated = self._documents[index].with_share(grant)
        self._documents[index] = updated
        self._notify()
        return updated

    async def download(self, document_id: str) -> bytes:
        try:
            return await self._store.download_document(document_id)
        except _SESSION_ERRORS as exc:
            self._handle_unauthorized(exc)
            raise
