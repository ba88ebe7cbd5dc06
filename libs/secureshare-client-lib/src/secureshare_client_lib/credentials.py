"""Read identity claims from bearer credentials.

The client never verifies signatures or expiry; the backend does that on every
request. Decoding here only tells the UI who it is acting for, so only the
claims segment is read and the header is never inspected.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from jwt.utils import base64url_decode

from secureshare_client_lib.errors import MalformedCredentialError
from secureshare_client_lib.identity import Identity
from secureshare_client_lib.identity_factory import identity_from_claims
from secureshare_client_lib.impl.settings.access_control_settings import AccessControlSettings

logger = logging.getLogger(__name__)


def read_claims(raw_credential: str) -> dict[str, Any]:
    """Decode the claims segment of a compact token without verifying it.

    Raises
    ------
    MalformedCredentialError
        If the token is empty, has no claims segment, or its claims are not a JSON object.
    """
    if not isinstance(raw_credential, str) or not raw_credential.strip():
        raise MalformedCredentialError("Credential is empty")
    segments = raw_credential.strip().split(".")
    if len(segments) < 2:
        raise MalformedCredentialError("Credential is not a compact token")
    try:
        claims = json.loads(base64url_decode(segments[1]))
    except (ValueError, TypeError) as exc:
        raise MalformedCredentialError(f"Credential could not be decoded: {exc}") from exc
    if not isinstance(claims, dict):
        raise MalformedCredentialError("Credential claims are not a JSON object")
    return claims


def decode_credential(
    raw_credential: str | None, settings: AccessControlSettings | None = None
) -> Identity | None:
    """Return the identity carried by the credential, or ``None`` if there is none.

    Never raises: a missing or malformed credential means "no access".
    """
    if not raw_credential:
        return None
    try:
        claims = read_claims(raw_credential)
    except MalformedCredentialError as exc:
        logger.debug("Treating credential as anonymous: %s", exc)
        return None

    identity = identity_from_claims(claims, settings)
    if identity is None:
        logger.debug("Credential carries no user id claim; treating as anonymous")
    return identity
