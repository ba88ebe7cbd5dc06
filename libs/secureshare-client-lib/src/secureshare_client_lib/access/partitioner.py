"""Split a document collection into owned and shared-with-me views."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from secureshare_client_lib.access.classifier import classify
from secureshare_client_lib.access.models import AccessRelationship
from secureshare_client_lib.documents.models import Document
from secureshare_client_lib.identity import Identity


@dataclass(frozen=True)
class DocumentPartition:
    """Documents the identity owns and documents shared with it, in input order."""

    owned: tuple[Document, ...] = field(default_factory=tuple)
    shared_with_me: tuple[Document, ...] = field(default_factory=tuple)

    def filtered(self, term: str) -> "DocumentPartition":
        """Return the partition narrowed to display names containing ``term``."""
        return DocumentPartition(
            owned=tuple(filter_by_name(self.owned, term)),
            shared_with_me=tuple(filter_by_name(self.shared_with_me, term)),
        )


def partition(identity: Identity | None, documents: Iterable[Document]) -> DocumentPartition:
    """Partition ``documents`` for ``identity``.

    Always computed from scratch; callers must not patch a previous result.
    """
    owned: list[Document] = []
    shared: list[Document] = []
    for document in documents:
        relationship = classify(identity, document)
        if relationship == AccessRelationship.OWNER:
            owned.append(document)
        elif relationship.is_shared and identity is not None and document.owner.id != identity.id:
            shared.append(document)
    return DocumentPartition(owned=tuple(owned), shared_with_me=tuple(shared))


def filter_by_name(documents: Iterable[Document], term: str | None) -> list[Document]:
    """Case-insensitive substring match on the display name, preserving order."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(documents)
    return [document for document in documents if needle in document.display_name.lower()]
