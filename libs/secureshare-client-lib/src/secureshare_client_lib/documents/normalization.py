"""Normalize backend records into the canonical document models.

The backend has served two document shapes over time (``_id``/``id``,
``size``/``fileSize``, ``uploadedAt``/``createdAt`` ...). Everything past this
module only sees :class:`Document`.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable

from pydantic import ValidationError

from secureshare_client_lib.documents.models import (
    AccessLevel,
    AuditActor,
    AuditEntry,
    DirectoryUser,
    Document,
    DocumentOwner,
    ShareEntry,
)
from secureshare_client_lib.errors import ProtocolError

logger = logging.getLogger(__name__)

_ACCESS_LEVEL_ALIASES = {
    "view": AccessLevel.VIEW,
    "viewer": AccessLevel.VIEW,
    "read": AccessLevel.VIEW,
    "edit": AccessLevel.EDIT,
    "editor": AccessLevel.EDIT,
    "write": AccessLevel.EDIT,
}


def _first(record: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; unparseable values become ``None``."""
    if isinstance(value, datetime):
        return value
    text = _as_str(value)
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Ignoring unparseable timestamp %r", text)
        return None


def file_extension(name: str) -> str | None:
    """Return the lower-cased extension of a file name, if it has one."""
    if "." not in name:
        return None
    extension = name.rsplit(".", 1)[1].strip().lower()
    return extension or None


def parse_access_level(value: Any) -> AccessLevel | None:
    text = _as_str(value)
    if not text:
        return None
    return _ACCESS_LEVEL_ALIASES.get(text.lower())


def _record_id(value: Any) -> str | None:
    """Ids arrive either as bare values or as embedded objects with ``_id``/``id``."""
    if isinstance(value, dict):
        return _as_str(_first(value, "_id", "id"))
    return _as_str(value)


def _require_mapping(record: Any, kind: str) -> dict[str, Any]:
    if not isinstance(record, dict):
        raise ProtocolError(f"Expected a {kind} object, got {type(record).__name__}")
    return record


def normalize_owner(value: Any) -> DocumentOwner | None:
    owner_id = _record_id(value)
    if not owner_id:
        return None
    if isinstance(value, dict):
        return DocumentOwner(id=owner_id, email=_as_str(value.get("email")), name=_as_str(value.get("name")))
    return DocumentOwner(id=owner_id)


def normalize_share_entries(values: Any) -> list[ShareEntry]:
    if not isinstance(values, list):
        return []
    entries: list[ShareEntry] = []
    for value in values:
        if not isinstance(value, dict):
            continue
        grantee_id = _record_id(_first(value, "granteeId", "user", "userId", "grantee"))
        level = parse_access_level(_first(value, "accessLevel", "accessType", "permission"))
        if not grantee_id or level is None:
            logger.warning("Skipping share entry without grantee or known access level: %s", value)
            continue
        entries.append(ShareEntry(grantee_id=grantee_id, access_level=level))
    return entries


def normalize_document(record: Any) -> Document:
    """Convert one backend document record into a :class:`Document`."""
    record = _require_mapping(record, "document")
    document_id = _as_str(_first(record, "_id", "id"))
    if not document_id:
        raise ProtocolError("Document record has no id")
    owner = normalize_owner(record.get("owner"))
    if owner is None:
        raise ProtocolError(f"Document {document_id} has no owner")

    display_name = _as_str(_first(record, "name", "originalname", "displayName", "filename")) or ""
    mime_or_extension = (
        _as_str(_first(record, "type", "fileType", "mimeType", "mimetype"))
        or file_extension(display_name)
        or "unknown"
    )
    try:
        return Document(
            id=document_id,
            display_name=display_name,
            size_bytes=_as_int(_first(record, "size", "fileSize", "sizeBytes")),
            mime_or_extension=mime_or_extension,
            created_at=parse_timestamp(_first(record, "uploadedAt", "createdAt")),
            owner=owner,
            shared_with=normalize_share_entries(record.get("sharedWith")),
        )
    except ValidationError as exc:
        raise ProtocolError(f"Document {document_id} is malformed: {exc}") from exc


def normalize_documents(records: Any) -> list[Document]:
    """Convert a list of backend document records, keeping their order."""
    if not isinstance(records, list):
        raise ProtocolError("Expected a list of documents")
    return [normalize_document(record) for record in records]


def normalize_directory_user(record: Any) -> DirectoryUser:
    record = _require_mapping(record, "user")
    user_id = _as_str(_first(record, "_id", "id", "userId"))
    if not user_id:
        raise ProtocolError("User record has no id")
    return DirectoryUser(id=user_id, email=_as_str(record.get("email")), name=_as_str(record.get("name")))


def _resource_ref(record: dict[str, Any]) -> str:
    resource_type = _as_str(record.get("resourceType"))
    resource_id = _as_str(record.get("resourceId"))
    if resource_type and resource_id:
        return f"{resource_type} ({resource_id})"
    return resource_type or resource_id or _as_str(record.get("target")) or ""


def normalize_audit_entry(record: Any) -> AuditEntry:
    """Convert one audit record into an :class:`AuditEntry`."""
    record = _require_mapping(record, "audit entry")
    entry_id = _as_str(_first(record, "_id", "id"))
    action = _as_str(record.get("action"))
    if not entry_id or not action:
        raise ProtocolError("Audit entry has no id or action")

    user = record.get("user")
    if isinstance(user, dict):
        actor = AuditActor(id=_record_id(user), email=_as_str(user.get("email")))
    else:
        # Older entries carry the actor's email as a plain string.
        actor = AuditActor(email=_as_str(user))

    details = _first(record, "details", "detailPayload")
    if isinstance(details, dict):
        detail_payload = details
    elif details is not None:
        detail_payload = {"message": details}
    else:
        detail_payload = {}

    return AuditEntry(
        id=entry_id,
        actor=actor,
        action=action,
        resource_ref=_resource_ref(record),
        timestamp=parse_timestamp(_first(record, "createdAt", "timestamp")),
        status=_as_str(record.get("status")),
        detail_payload=detail_payload,
    )


def normalize_audit_entries(records: Iterable[Any] | Any) -> list[AuditEntry]:
    if not isinstance(records, list):
        raise ProtocolError("Expected a list of audit entries")
    return [normalize_audit_entry(record) for record in records]
