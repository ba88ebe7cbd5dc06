import pytest
from mocks.mock_document_store import MockDocumentStore

from secureshare_client_lib.documents.models import AccessLevel, ShareGrant
from secureshare_client_lib.errors import (
    NetworkFailureError,
    ProtocolError,
    RequestRejectedError,
    UnauthorizedError,
)
from secureshare_client_lib.reconciler import RETRY_NOTICE, DocumentReconciler


def _ids(documents):
    return [document.id for document in documents]


@pytest.fixture
def store(document_factory):
    return MockDocumentStore(
        documents=[
            document_factory("d1", owner_id="u1"),
            document_factory("d2", owner_id="u2", shares=[("u1", "view")]),
            document_factory("d3", owner_id="u1"),
        ]
    )


@pytest.mark.asyncio
async def test_refresh_replaces_collection_and_notifies(store, session):
    reconciler = DocumentReconciler(store, session)
    snapshots = []
    reconciler.subscribe(snapshots.append)

    await reconciler.refresh()

    assert _ids(reconciler.documents) == ["d1", "d2", "d3"]
    assert _ids(snapshots[-1]) == ["d1", "d2", "d3"]
    views = reconciler.partition()
    assert _ids(views.owned) == ["d1", "d3"]
    assert _ids(views.shared_with_me) == ["d2"]


@pytest.mark.asyncio
async def test_upload_lands_at_head_exactly_once(store, session, document_factory):
    reconciler = DocumentReconciler(store, session)
    await reconciler.refresh()
    store.next_upload = document_factory("d9", owner_id="u1")

    uploaded = await reconciler.upload("d9.pdf", b"data")

    assert uploaded.id == "d9"
    assert _ids(reconciler.documents) == ["d9", "d1", "d2", "d3"]
    reconciler.apply_upload(uploaded)
    assert _ids(reconciler.documents).count("d9") == 1
    assert _ids(reconciler.partition().owned)[0] == "d9"


@pytest.mark.asyncio
async def test_share_success_matches_fresh_fetch(store, session):
    reconciler = DocumentReconciler(store, session)
    await reconciler.refresh()
    await store.share_document("d1", ShareGrant(grantee_id="u5", access_level=AccessLevel.EDIT))

    await reconciler.apply_share_success()

    assert reconciler.documents == tuple(await store.list_documents())
    assert reconciler.documents[0].share_for("u5").access_level == AccessLevel.EDIT


@pytest.mark.asyncio
async def test_delete_removes_and_refetches(store, session):
    reconciler = DocumentReconciler(store, session)
    await reconciler.refresh()

    await reconciler.apply_delete("d1")

    assert _ids(reconciler.documents) == ["d2", "d3"]
    assert store.call_names()[-2:] == ["delete_document", "list_documents"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [RequestRejectedError("Only the owner can delete this document", status_code=403), NetworkFailureError("down")],
)
async def test_failed_delete_restores_document_in_place(store, session, error):
    reconciler = DocumentReconciler(store, session)
    await reconciler.refresh()
    store.errors["delete_document"] = error
    snapshots = []
    reconciler.subscribe(snapshots.append)

    with pytest.raises(type(error)):
        await reconciler.apply_delete("d2")

    assert _ids(snapshots[0]) == ["d1", "d3"]
    assert _ids(reconciler.documents) == ["d1", "d2", "d3"]


@pytest.mark.asyncio
async def test_unauthorized_refresh_clears_collection_and_session(store, session):
    reconciler = DocumentReconciler(store, session)
    await reconciler.refresh()
    reasons = []
    session.add_logout_listener(reasons.append)
    store.errors["list_documents"] = UnauthorizedError(status_code=401)

    with pytest.raises(UnauthorizedError):
        await reconciler.refresh()

    assert reconciler.documents == ()
    assert session.credential is None
    assert reasons == ["unauthorized"]


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [NetworkFailureError("down"), ProtocolError("bad envelope")])
async def test_failed_refresh_clears_collection_and_sets_notice(store, session, error):
    reconciler = DocumentReconciler(store, session)
    await reconciler.refresh()
    store.errors["list_documents"] = error

    with pytest.raises(type(error)):
        await reconciler.refresh()

    assert reconciler.documents == ()
    assert reconciler.notice == RETRY_NOTICE
    assert session.credential is not None

    del store.errors["list_documents"]
    await reconciler.refresh()
    assert reconciler.notice is None


@pytest.mark.asyncio
async def test_apply_share_grant_replaces_entry_for_grantee(store, session):
    reconciler = DocumentReconciler(store, session)
    await reconciler.refresh()

    updated = reconciler.apply_share_grant("d2", ShareGrant(grantee_id="u1", access_level=AccessLevel.EDIT))

    assert len(updated.shared_with) == 1
    assert updated.share_for("u1").access_level == AccessLevel.EDIT
    with pytest.raises(KeyError):
        reconciler.apply_share_grant("missing", ShareGrant(grantee_id="u1", access_level=AccessLevel.VIEW))


@pytest.mark.asyncio
async def test_unsubscribed_listener_is_not_notified(store, session):
    reconciler = DocumentReconciler(store, session)
    snapshots = []
    reconciler.subscribe(snapshots.append)
    reconciler.unsubscribe(snapshots.append)

    await reconciler.refresh()

    assert snapshots == []


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [401, 403])
async def test_unauthorized_upload_clears_collection_and_session(store, session, document_factory, status_code):
    reconciler = DocumentReconciler(store, session)
    await reconciler.refresh()
    store.next_upload = document_factory("d9", owner_id="u1")
    store.errors["upload_document"] = UnauthorizedError(status_code=status_code)

    with pytest.raises(UnauthorizedError):
        await reconciler.upload("d9.pdf", b"data")

    assert reconciler.documents == ()
    assert session.credential is None


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [401, 403])
async def test_unauthorized_delete_does_not_restore_document(store, session, status_code):
    reconciler = DocumentReconciler(store, session)
    await reconciler.refresh()
    reasons = []
    session.add_logout_listener(reasons.append)
    store.errors["delete_document"] = UnauthorizedError(status_code=status_code)

    with pytest.raises(UnauthorizedError):
        await reconciler.apply_delete("d2")

    assert reconciler.documents == ()
    assert "d2" not in _ids(reconciler.documents)
    assert session.credential is None
    assert reasons == ["unauthorized"]
    assert store.call_names()[-1] == "delete_document"


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [401, 403])
async def test_unauthorized_download_clears_collection_and_session(store, session, status_code):
    reconciler = DocumentReconciler(store, session)
    await reconciler.refresh()
    store.errors["download_document"] = UnauthorizedError(status_code=status_code)

    with pytest.raises(UnauthorizedError):
        await reconciler.download("d1")

    assert reconciler.documents == ()
    assert session.credential is None


@pytest.mark.asyncio
async def test_download_returns_content(store, session):
    reconciler = DocumentReconciler(store, session)
    store.contents["d1"] = b"payload"

    assert await reconciler.download("d1") == b"payload"


@pytest.mark.asyncio
async def test_committed_delete_with_failed_refetch_is_not_raised(store, session):
    reconciler = DocumentReconciler(store, session)
    await reconciler.refresh()
    store.errors["list_documents"] = NetworkFailureError("down")

    await reconciler.apply_delete("d1")

    assert "d1" not in _ids(store.documents)
    assert reconciler.documents == ()
    assert reconciler.notice == RETRY_NOTICE


@pytest.mark.asyncio
async def test_partition_defaults_to_session_identity(store, session):
    reconciler = DocumentReconciler(store, session)
    await reconciler.refresh()

    assert _ids(reconciler.partition().owned) == ["d1", "d3"]
    views = reconciler.partition(None)
    assert views.owned == ()
    assert views.shared_with_me == ()
