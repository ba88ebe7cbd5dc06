from datetime import datetime, timezone

import pytest

from secureshare_client_lib.documents.models import AccessLevel
from secureshare_client_lib.documents.normalization import (
    normalize_audit_entry,
    normalize_directory_user,
    normalize_document,
    normalize_documents,
)
from secureshare_client_lib.errors import ProtocolError


def test_normalizes_mongo_style_record():
    document = normalize_document(
        {
            "_id": "d1",
            "name": "report.pdf",
            "type": "application/pdf",
            "size": 2048,
            "uploadedAt": "2024-01-15T10:30:00Z",
            "owner": {"_id": "u1", "email": "u1@example.com", "name": "User One"},
            "sharedWith": [{"user": "u2", "accessType": "edit"}],
        }
    )
    assert document.id == "d1"
    assert document.display_name == "report.pdf"
    assert document.mime_or_extension == "application/pdf"
    assert document.size_bytes == 2048
    assert document.created_at == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert document.owner.id == "u1"
    assert document.owner.email == "u1@example.com"
    assert [(entry.grantee_id, entry.access_level) for entry in document.shared_with] == [("u2", AccessLevel.EDIT)]


def test_normalizes_alternate_record_shape():
    document = normalize_document(
        {
            "id": "d2",
            "originalname": "Budget.XLSX",
            "fileSize": "4096",
            "createdAt": "2024-02-01T08:00:00+00:00",
            "owner": "u1",
            "sharedWith": [{"user": {"_id": "u3"}, "accessLevel": "View"}],
        }
    )
    assert document.id == "d2"
    assert document.display_name == "Budget.XLSX"
    assert document.mime_or_extension == "xlsx"
    assert document.size_bytes == 4096
    assert document.owner.id == "u1"
    assert document.owner.email is None
    assert document.shared_with[0].grantee_id == "u3"
    assert document.shared_with[0].access_level == AccessLevel.VIEW


def test_missing_optional_fields_get_defaults():
    document = normalize_document({"_id": "d3", "name": "README", "owner": {"_id": "u1"}, "uploadedAt": "garbage"})
    assert document.mime_or_extension == "unknown"
    assert document.size_bytes is None
    assert document.created_at is None
    assert document.shared_with == []


def test_unknown_access_levels_are_skipped():
    document = normalize_document(
        {
            "_id": "d4",
            "name": "a.txt",
            "owner": {"_id": "u1"},
            "sharedWith": [{"user": "u2", "accessType": "superuser"}, {"user": "u3", "accessType": "write"}],
        }
    )
    assert [(entry.grantee_id, entry.access_level) for entry in document.shared_with] == [("u3", AccessLevel.EDIT)]


@pytest.mark.parametrize(
    "record",
    [
        {"name": "no-id.txt", "owner": {"_id": "u1"}},
        {"_id": "d5", "name": "no-owner.txt"},
        {"_id": "d6", "owner": {"email": "nobody@example.com"}},
        "not-a-record",
    ],
)
def test_records_without_id_or_owner_are_protocol_errors(record):
    with pytest.raises(ProtocolError):
        normalize_document(record)


def test_normalize_documents_requires_a_list():
    with pytest.raises(ProtocolError):
        normalize_documents({"_id": "d1"})


def test_normalize_directory_user():
    user = normalize_directory_user({"_id": "u2", "email": "u2@example.com"})
    assert user.id == "u2"
    assert user.email == "u2@example.com"


def test_normalize_audit_entry():
    entry = normalize_audit_entry(
        {
            "_id": "a1",
            "user": {"_id": "u1", "email": "admin@company.com"},
            "action": "FILE_SHARE",
            "resourceType": "document",
            "resourceId": "d1",
            "status": "success",
            "details": {"grantee": "u2"},
            "createdAt": "2024-01-15T09:45:00Z",
        }
    )
    assert entry.actor.email == "admin@company.com"
    assert entry.resource_ref == "document (d1)"
    assert entry.detail_payload == {"grantee": "u2"}
    assert entry.timestamp is not None


def test_legacy_audit_entry_shape():
    entry = normalize_audit_entry(
        {
            "id": "1",
            "action": "FILE_UPLOAD",
            "user": "john@company.com",
            "target": "document.pdf",
            "timestamp": "2024-01-15T10:30:00Z",
            "details": "Uploaded new document",
        }
    )
    assert entry.actor.email == "john@company.com"
    assert entry.resource_ref == "document.pdf"
    assert entry.detail_payload == {"message": "Uploaded new document"}
