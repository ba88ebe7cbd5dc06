import jwt
import pytest

from secureshare_client_lib.documents.models import AccessLevel, Document, DocumentOwner, ShareEntry
from secureshare_client_lib.session import InMemoryCredentialStore, SessionContext

_SIGNING_KEY = "test-signing-key-long-enough-for-hs256"


def make_token(**claims) -> str:
    return jwt.encode(claims, _SIGNING_KEY, algorithm="HS256")


def make_document(document_id: str, owner_id: str, shares=None, name: str | None = None) -> Document:
    return Document(
        id=document_id,
        display_name=name or f"{document_id}.pdf",
        size_bytes=1024,
        mime_or_extension="pdf",
        owner=DocumentOwner(id=owner_id, email=f"{owner_id}@example.com"),
        shared_with=[
            ShareEntry(grantee_id=grantee_id, access_level=AccessLevel(level)) for grantee_id, level in (shares or [])
        ],
    )


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def document_factory():
    return make_document


@pytest.fixture
def session() -> SessionContext:
    context = SessionContext(InMemoryCredentialStore())
    context.login(make_token(userId="u1", email="u1@example.com", roles=["user"]))
    return context


@pytest.fixture
def admin_session() -> SessionContext:
    context = SessionContext(InMemoryCredentialStore())
    context.login(make_token(userId="admin-1", roles=["admin", "user"]))
    return context
