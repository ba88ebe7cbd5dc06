#!/usr/bin/env python3
"""Operational helpers for inspecting SecureShare sessions and access."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any

from secureshare_client_lib.access.admin_gate import AuditLogGate, AuditLogStatus, is_privileged
from secureshare_client_lib.access.classifier import classify
from secureshare_client_lib.credentials import decode_credential
from secureshare_client_lib.documents.models import Document
from secureshare_client_lib.errors import SecureShareError
from secureshare_client_lib.impl.settings import (
    AccessControlSettings,
    LoggingSettings,
    SecureShareApiSettings,
    SessionSettings,
)
from secureshare_client_lib.impl.store.rest_document_store import RestDocumentStore
from secureshare_client_lib.reconciler import DocumentReconciler
from secureshare_client_lib.session import SessionContext

logger = logging.getLogger(__name__)


def describe_credential(raw_credential: str, settings: AccessControlSettings | None = None) -> dict[str, Any]:
    settings = settings or AccessControlSettings()
    identity = decode_credential(raw_credential, settings)
    if identity is None:
        return {"authenticated": False, "id": None, "roles": [], "privileged": False}
    return {
        "authenticated": True,
        "id": identity.id,
        "email": identity.email,
        "roles": sorted(identity.roles),
        "privileged": is_privileged(identity, settings),
    }


def describe_document(document: Document, session: SessionContext) -> dict[str, Any]:
    return {
        "id": document.id,
        "name": document.display_name,
        "type": document.mime_or_extension,
        "size": document.size_bytes,
        "owner": document.owner.email or document.owner.id,
        "access": classify(session.identity, document).label,
    }


async def list_documents(session: SessionContext, api_settings: SecureShareApiSettings) -> dict[str, Any]:
    reconciler = DocumentReconciler(RestDocumentStore(api_settings, session), session)
    await reconciler.refresh()
    views = reconciler.partition()
    return {
        "owned": [describe_document(document, session) for document in views.owned],
        "shared_with_me": [describe_document(document, session) for document in views.shared_with_me],
    }


async def audit_log(session: SessionContext, api_settings: SecureShareApiSettings) -> dict[str, Any]:
    view = await AuditLogGate(RestDocumentStore(api_settings, session), session).load()
    return {
        "status": view.status.value,
        "message": view.message,
        "entries": [entry.model_dump(mode="json") for entry in view.entries],
    }


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="SecureShare operational helper.")
    parser.add_argument("--state-file", default=None, help="Session file; defaults to SECURESHARE_SESSION_STORAGE_FILE.")
    sub = parser.add_subparsers(dest="command", required=True)

    inspect = sub.add_parser("inspect-token")
    inspect.add_argument("--token", default=None, help="Raw bearer credential; defaults to the stored one.")

    sub.add_parser("list-documents")
    sub.add_parser("audit-log")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    LoggingSettings().configure()

    session_settings = SessionSettings()
    if args.state_file:
        session_settings = SessionSettings(storage_file=args.state_file)
    access_settings = AccessControlSettings()
    session = SessionContext.from_settings(session_settings, access_settings)

    if args.command == "inspect-token":
        raw = args.token or session.credential
        if not raw:
            print(json.dumps({"error": "no credential given or stored"}, indent=2))
            return 1
        print(json.dumps(describe_credential(raw, access_settings), indent=2))
        return 0

    api_settings = SecureShareApiSettings()
    try:
        if args.command == "list-documents":
            print(json.dumps(asyncio.run(list_documents(session, api_settings)), indent=2))
            return 0
        if args.command == "audit-log":
            result = asyncio.run(audit_log(session, api_settings))
            print(json.dumps(result, indent=2))
            return 0 if result["status"] == AuditLogStatus.LOADED else 1
    except SecureShareError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(json.dumps({"error": str(exc)}, indent=2))
        return 1

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
