"""Document store backed by the SecureShare REST API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import requests

from secureshare_client_lib.documents.models import (
    AuditEntry,
    DirectoryUser,
    Document,
    RegistrationRequest,
    ShareGrant,
)
from secureshare_client_lib.documents.normalization import (
    normalize_audit_entries,
    normalize_directory_user,
    normalize_document,
    normalize_documents,
)
from secureshare_client_lib.errors import (
    NetworkFailureError,
    ProtocolError,
    RequestRejectedError,
    UnauthorizedError,
)
from secureshare_client_lib.impl.settings.api_settings import SecureShareApiSettings
from secureshare_client_lib.session import SessionContext
from secureshare_client_lib.store.document_store import DocumentStore

logger = logging.getLogger(__name__)

_UNAUTHORIZED_STATUSES = {401, 403}


class RestDocumentStore(DocumentStore):
    """Call the backend over HTTP.

    Every response must be an envelope ``{"success": bool, "data": ..., "message": ...}``;
    downloads are the only endpoint answering with raw bytes.
    """

    def __init__(
        self,
        settings: SecureShareApiSettings,
        session: SessionContext,
        http_session: requests.Session | None = None,
    ):
        self._settings = settings
        self._session = session
        self._http = http_session or requests.Session()

    @staticmethod
    def _document_path(document_id: str, suffix: str = "") -> str:
        return f"/documents/{quote(document_id, safe='')}{suffix}"

    @staticmethod
    def _message_from(response: requests.Response) -> str | None:
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return None

    def _request(self, method: str, path: str, *, authenticated: bool = True, **kwargs: Any) -> requests.Response:
        headers = dict(kwargs.pop("headers", {}) or {})
        if authenticated:
            headers["Authorization"] = f"Bearer {self._session.require_credential()}"
        url = f"{self._settings.api_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self._http.request(
                method,
                url,
                headers=headers,
                timeout=self._settings.timeout_seconds,
                verify=self._settings.verify_tls,
                **kwargs,
            )
        except requests.Timeout as exc:
            logger.warning("%s %s timed out after %ss", method, path, self._settings.timeout_seconds)
            raise NetworkFailureError(f"Request to {path} timed out") from exc
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkFailureError(f"Request to {path} failed: {exc}") from exc

        if response.status_code in _UNAUTHORIZED_STATUSES:
            logger.warning("%s %s rejected with status %s", method, path, response.status_code)
            raise UnauthorizedError(
                self._message_from(response) or "Not authorized",
                status_code=response.status_code,
            )
        return response

    def _unwrap(self, response: requests.Response) -> Any:
        """Validate the response envelope and return its ``data``."""
        try:
            body = response.json()
        except ValueError as exc:
            raise ProtocolError(f"Response with status {response.status_code} is not JSON") from exc

        if not isinstance(body, dict) or not isinstance(body.get("success"), bool):
            raise ProtocolError(f"Response with status {response.status_code} is not an envelope")
        if not body["success"]:
            message = str(body.get("message") or f"Request failed with status {response.status_code}")
            logger.warning("Backend rejected request: %s", message)
            raise RequestRejectedError(message, status_code=response.status_code)
        if response.status_code >= 400:
            raise ProtocolError(f"Successful envelope with error status {response.status_code}")
        return body.get("data")

    async def _call(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await asyncio.to_thread(self._request, method, path, **kwargs)
        return self._unwrap(response)

    async def list_documents(self) -> list[Document]:
        data = await self._call("GET", "/documents")
        return normalize_documents(data if data is not None else [])

    async def upload_document(self, filename: str, content: bytes, content_type: str | None = None) -> Document:
        files = {"file": (filename, content, content_type or "application/octet-stream")}
        data = await self._call("POST", "/documents/upload", files=files)
        document = normalize_document(data)
        logger.info("Uploaded %s as document %s", filename, document.id)
        return document

    async def delete_document(self, document_id: str) -> None:
        await self._call("DELETE", self._document_path(document_id))
        logger.info("Deleted document %s", document_id)

    async def download_document(self, document_id: str) -> bytes:
        response = await asyncio.to_thread(self._request, "GET", self._document_path(document_id, "/download"))
        if response.status_code >= 400:
            self._unwrap(response)
            raise ProtocolError(f"Download failed with status {response.status_code}")
        return response.content

    async def share_document(self, document_id: str, grant: ShareGrant, message: str = "") -> None:
        payload: dict[str, Any] = {"userId": grant.grantee_id, "accessType": grant.access_level.value}
        if message.strip():
            payload["message"] = message.strip()
        await self._call("POST", self._document_path(document_id, "/share"), json=payload)
        logger.info("Shared document %s with %s (%s)", document_id, grant.grantee_id, grant.access_level)

    async def resolve_user(self, email: str) -> DirectoryUser | None:
        response = await asyncio.to_thread(self._request, "GET", "/users/by-email", params={"email": email})
        if response.status_code == 404:
            return None
        data = self._unwrap(response)
        if not data:
            return None
        return normalize_directory_user(data)

    async def list_audit_entries(self) -> list[AuditEntry]:
        data = await self._call("GET", "/audit-logs")
        return normalize_audit_entries(data if data is not None else [])

    async def register_user(self, request: RegistrationRequest) -> None:
        await self._call("POST", "/users/register", authenticated=False, json=request.to_payload())
        logger.info("Registered account %s", request.username)
