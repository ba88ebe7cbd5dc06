"""Gate the audit log behind the administrator role.

The gate only decides what the client shows. It is not a security boundary:
role claims are read from an unverified credential and the backend enforces
authorization on every audit request.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Iterable

from pydantic import BaseModel, Field

from secureshare_client_lib.documents.models import AuditEntry
from secureshare_client_lib.errors import (
    NetworkFailureError,
    ProtocolError,
    RequestRejectedError,
    UnauthorizedError,
)
from secureshare_client_lib.identity import Identity
from secureshare_client_lib.impl.settings.access_control_settings import AccessControlSettings
from secureshare_client_lib.session import SessionContext
from secureshare_client_lib.store.document_store import DocumentStore

logger = logging.getLogger(__name__)

ACCESS_DENIED_MESSAGE = (
    "You need administrator privileges to view audit logs. "
    "Please contact your system administrator if you believe this is an error."
)
RETRY_NOTICE = "Failed to fetch audit logs. Please try again."


def is_privileged(identity: Identity | None, settings: AccessControlSettings | None = None) -> bool:
    """Return ``True`` if the identity carries the administrator role marker."""
    if identity is None:
        return False
    settings = settings or AccessControlSettings()
    return identity.has_role(settings.admin_role)


class AuditLogStatus(StrEnum):
    """What the audit view should render."""

    DENIED = "denied"
    LOADED = "loaded"
    ERROR = "error"


class AuditLogView(BaseModel):
    """Audit entries together with the reason they are (not) shown.

    ``denied`` and an empty ``loaded`` list are deliberately distinct states.
    """

    status: AuditLogStatus
    entries: list[AuditEntry] = Field(default_factory=list)
    message: str | None = None

    def filtered(self, term: str) -> list[AuditEntry]:
        return filter_audit_entries(self.entries, term)


def filter_audit_entries(entries: Iterable[AuditEntry], term: str | None) -> list[AuditEntry]:
    """Case-insensitive substring match on action, actor email and resource."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(entries)
    matches = []
    for entry in entries:
        haystacks = (entry.action, entry.actor.email or "", entry.resource_ref)
        if any(needle in haystack.lower() for haystack in haystacks):
            matches.append(entry)
    return matches


class AuditLogGate:
    """Load the audit log only for administrators."""

    def __init__(self, store: DocumentStore, session: SessionContext):
        self._store = store
        self._session = session

    def _denied(self) -> AuditLogView:
        return AuditLogView(status=AuditLogStatus.DENIED, message=ACCESS_DENIED_MESSAGE)

    async def load(self) -> AuditLogView:
        """Return the audit view for the current session."""
        if not self._session.credential:
            logger.info("No credential stored; sending the user back to login")
            self._session.logout("missing_credential")
            return self._denied()

        identity = self._session.identity
        if not is_privileged(identity, self._session.access_settings):
            logger.info("User %s is not an admin, skipping audit log fetch", identity.id if identity else None)
            return self._denied()

        try:
            entries = await self._store.list_audit_entries()
        except UnauthorizedError as exc:
            logger.warning("Audit service refused access (status %s)", exc.status_code)
            return self._denied()
        except (ProtocolError, NetworkFailureError, RequestRejectedError) as exc:
            logger.warning("Failed to fetch audit logs: %s", exc)
            message = exc.message if isinstance(exc, RequestRejectedError) else RETRY_NOTICE
            return AuditLogView(status=AuditLogStatus.ERROR, message=message)

        return AuditLogView(status=AuditLogStatus.LOADED, entries=entries)
