"""Two-step sharing workflow: resolve the recipient, then grant access."""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import Callable

from pydantic import BaseModel

from secureshare_client_lib.documents.models import DirectoryUser, ShareGrant, ShareGrantRequest
from secureshare_client_lib.errors import (
    NetworkFailureError,
    NoCredentialError,
    ProtocolError,
    RequestRejectedError,
    SecureShareError,
    ShareInProgressError,
    ShareValidationError,
    UnauthorizedError,
)
from secureshare_client_lib.reconciler import DocumentReconciler
from secureshare_client_lib.session import SessionContext
from secureshare_client_lib.store.document_store import DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_GRANT_REJECTED_MESSAGE = "Sharing failed. Please try again or contact support."


class ShareState(StrEnum):
    """States of a share submission."""

    IDLE = "idle"
    RESOLVING_RECIPIENT = "resolving_recipient"
    GRANTING = "granting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ShareFailureReason(StrEnum):
    """Why a share submission failed."""

    RECIPIENT_NOT_FOUND = "recipient_not_found"
    GRANT_REJECTED = "grant_rejected"
    UNAUTHORIZED = "unauthorized"


class ShareFailure(BaseModel):
    """Dismissible, user-readable failure scoped to the sharing dialog."""

    reason: ShareFailureReason
    message: str


StateListener = Callable[[ShareState], None]

_IN_FLIGHT = {ShareState.RESOLVING_RECIPIENT, ShareState.GRANTING}


class ShareWorkflow:
    """Drive one sharing dialog.

    ``idle -> resolving_recipient -> granting -> succeeded | failed``. The
    workflow never edits documents itself; on success it asks the reconciler to
    refetch. Submitting again while a request is in flight is refused.
    """

    def __init__(
        self,
        store: DocumentStore,
        session: SessionContext,
        reconciler: DocumentReconciler | None = None,
    ):
        self._store = store
        self._session = session
        self._reconciler = reconciler
        self._state = ShareState.IDLE
        self._failure: ShareFailure | None = None
        self._grant: ShareGrant | None = None
        self._task: asyncio.Task[ShareState] | None = None
        self._discarded: set[asyncio.Task[ShareState]] = set()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> ShareState:
        return self._state

    @property
    def failure(self) -> ShareFailure | None:
        return self._failure

    @property
    def grant(self) -> ShareGrant | None:
        """The grant committed by the last successful submission."""
        return self._grant

    @property
    def in_flight(self) -> bool:
        return self._state in _IN_FLIGHT

    @property
    def can_submit(self) -> bool:
        return not self.in_flight

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def _set_state(self, state: ShareState) -> None:
        self._state = state
        logger.debug("Share workflow is now %s", state)
        for listener in list(self._listeners):
            listener(state)

    def _fail(self, reason: ShareFailureReason, message: str) -> ShareState:
        self._failure = ShareFailure(reason=reason, message=message)
        logger.info("Share failed (%s): %s", reason, message)
        self._set_state(ShareState.FAILED)
        return self._state

    def _fail_unauthorized(self, exc: SecureShareError) -> ShareState:
        self._session.logout("unauthorized")
        return self._fail(ShareFailureReason.UNAUTHORIZED, str(exc) or "Your session has expired.")

    async def submit(self, document_id: str, request: ShareGrantRequest) -> ShareState:
        """Share ``document_id`` with the recipient named in ``request``.

        Failures of either step, including an expired session, are reported
        through ``state`` and ``failure`` rather than raised.

        Raises
        ------
        ShareValidationError
            If the recipient email is empty. No request is issued.
        ShareInProgressError
            If a previous submission is still in flight.
        """
        if self.in_flight:
            raise ShareInProgressError("A share request is already in progress")
        email = request.recipient_email.strip()
        if not email:
            raise ShareValidationError("Please enter the recipient's email address.")

        self._failure = None
        self._grant = None
        task = asyncio.create_task(self._run(document_id, email, request))
        self._task = task
        try:
            return await task
        except asyncio.CancelledError:
            if task in self._discarded:
                logger.info("Share of document %s cancelled; discarding its result", document_id)
                return self._state
            raise
        finally:
            self._discarded.discard(task)
            if self._task is task:
                self._task = None

    async def _resolve(self, email: str) -> DirectoryUser | None:
        try:
            return await self._store.resolve_user(email)
        except (ProtocolError, NetworkFailureError, RequestRejectedError) as exc:
            logger.warning("Recipient lookup for %s failed: %s", email, exc)
            return None

    async def _run(self, document_id: str, email: str, request: ShareGrantRequest) -> ShareState:
        self._set_state(ShareState.RESOLVING_RECIPIENT)
        try:
            recipient = await self._resolve(email)
        except (UnauthorizedError, NoCredentialError) as exc:
            return self._fail_unauthorized(exc)
        if recipient is None:
            return self._fail(ShareFailureReason.RECIPIENT_NOT_FOUND, f"No user found with email {email}.")

        identity = self._session.identity
        if identity is not None and recipient.id == identity.id:
            return self._fail(ShareFailureReason.GRANT_REJECTED, "You cannot share a document with yourself.")

        grant = ShareGrant(grantee_id=recipient.id, access_level=request.access_level)
        self._set_state(ShareState.GRANTING)
        try:
            await self._store.share_document(document_id, grant, request.message)
        except (UnauthorizedError, NoCredentialError) as exc:
            return self._fail_unauthorized(exc)
        except RequestRejectedError as exc:
            return self._fail(ShareFailureReason.GRANT_REJECTED, exc.message or DEFAULT_GRANT_REJECTED_MESSAGE)
        except (ProtocolError, NetworkFailureError) as exc:
            logger.warning("Share grant for document %s failed: %s", document_id, exc)
            return self._fail(ShareFailureReason.GRANT_REJECTED, DEFAULT_GRANT_REJECTED_MESSAGE)

        self._grant = grant
        self._set_state(ShareState.SUCCEEDED)
        logger.info("Shared document %s with %s (%s)", document_id, recipient.id, grant.access_level)

        if self._reconciler is not None:
            try:
                await self._reconciler.apply_share_success()
            except (UnauthorizedError, NoCredentialError):
                # The grant is committed; the reconciler has already ended the session.
                logger.warning("Session ended while refetching after sharing document %s", document_id)
            except (ProtocolError, NetworkFailureError, RequestRejectedError):
                # The grant is committed; the reconciler already carries the retry notice.
                logger.warning("Refetch after sharing document %s failed", document_id)
        return self._state

    def cancel(self) -> None:
        """Close the dialog. The result of an in-flight request is discarded."""
        task = self._task
        if task is not None and not task.done():
            self._discarded.add(task)
            task.cancel()
        self._task = None
        self._failure = None
        self._set_state(ShareState.IDLE)

    def dismiss_error(self) -> None:
        """Clear a failure so the user can retry from the same dialog."""
        if self._state == ShareState.FAILED:
            self._failure = None
            self._set_state(ShareState.IDLE)
