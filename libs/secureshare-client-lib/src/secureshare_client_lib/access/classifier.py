"""Classify the relationship between an identity and a document."""

from __future__ import annotations

from secureshare_client_lib.access.models import AccessRelationship, DocumentAction
from secureshare_client_lib.documents.models import AccessLevel, Document
from secureshare_client_lib.identity import Identity

_SHARED_RELATIONSHIPS = {
    AccessLevel.VIEW: AccessRelationship.SHARED_VIEW,
    AccessLevel.EDIT: AccessRelationship.SHARED_EDIT,
}

_PERMITTED_ACTIONS = {
    AccessRelationship.OWNER: frozenset({DocumentAction.DOWNLOAD, DocumentAction.SHARE, DocumentAction.DELETE}),
    AccessRelationship.SHARED_EDIT: frozenset({DocumentAction.DOWNLOAD}),
    AccessRelationship.SHARED_VIEW: frozenset({DocumentAction.DOWNLOAD}),
    AccessRelationship.NO_ACCESS: frozenset(),
}


def classify(identity: Identity | None, document: Document) -> AccessRelationship:
    """Return the access relationship of ``identity`` to ``document``.

    Linear in the number of shares on the document.
    """
    if identity is None:
        return AccessRelationship.NO_ACCESS
    if document.owner.id == identity.id:
        return AccessRelationship.OWNER
    entry = document.share_for(identity.id)
    if entry is None:
        return AccessRelationship.NO_ACCESS
    return _SHARED_RELATIONSHIPS[entry.access_level]


def permitted_actions(relationship: AccessRelationship) -> frozenset[DocumentAction]:
    """Return the actions offered for a relationship. Only owners share or delete."""
    return _PERMITTED_ACTIONS[relationship]


def can_perform(identity: Identity | None, document: Document, action: DocumentAction) -> bool:
    return action in permitted_actions(classify(identity, document))
