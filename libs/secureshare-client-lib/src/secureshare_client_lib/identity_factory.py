"""Helpers for building identities from decoded credential claims."""

from __future__ import annotations

from typing import Any, Iterable

from secureshare_client_lib.identity import Identity
from secureshare_client_lib.impl.settings.access_control_settings import AccessControlSettings


def _as_set(value: Any) -> set[str]:
    if value is None:
        return set()
    if isinstance(value, (list, tuple, set)):
        return {str(item).strip() for item in value if item is not None and str(item).strip()}
    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return set()
        if "," in trimmed:
            return {item.strip() for item in trimmed.split(",") if item.strip()}
        return {trimmed}
    return {str(value)}


def _as_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _first_claim(claims: dict[str, Any], keys: Iterable[str]) -> str | None:
    for key in keys:
        value = _as_optional_str(claims.get(key))
        if value:
            return value
    return None


def identity_from_claims(claims: dict[str, Any], settings: AccessControlSettings | None = None) -> Identity | None:
    """Build an identity from decoded claims, or ``None`` when no user id is present."""
    settings = settings or AccessControlSettings()
    user_id = _first_claim(claims, settings.user_id_claims)
    if not user_id:
        return None

    return Identity(
        id=user_id,
        roles=_as_set(claims.get(settings.roles_claim)),
        email=_as_optional_str(claims.get(settings.email_claim)),
        name=_as_optional_str(claims.get(settings.name_claim)),
        claims=claims,
    )
