"""Concrete document store implementations."""

from secureshare_client_lib.impl.store.rest_document_store import RestDocumentStore

__all__ = ["RestDocumentStore"]
