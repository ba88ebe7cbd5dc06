"""Document store interfaces."""

from secureshare_client_lib.store.document_store import DocumentStore

__all__ = ["DocumentStore"]
