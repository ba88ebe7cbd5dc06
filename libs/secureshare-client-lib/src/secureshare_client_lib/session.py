"""Session context holding the bearer credential and the user's profile snapshot."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, ValidationError

from secureshare_client_lib.credentials import decode_credential
from secureshare_client_lib.errors import NoCredentialError
from secureshare_client_lib.identity import Identity
from secureshare_client_lib.impl.settings.access_control_settings import AccessControlSettings
from secureshare_client_lib.impl.settings.session_settings import SessionSettings

logger = logging.getLogger(__name__)

LogoutListener = Callable[[str], None]


class UserProfile(BaseModel):
    """Lightweight profile shown next to the session (name, organization)."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str | None = None
    email: str | None = None
    organization: str | None = None


class CredentialStore(ABC):
    """Persistent storage for the credential and profile of one session."""

    @abstractmethod
    def load_credential(self) -> str | None:
        """Return the stored credential, if any."""

    @abstractmethod
    def load_profile(self) -> UserProfile | None:
        """Return the stored profile snapshot, if any."""

    @abstractmethod
    def save(self, credential: str, profile: UserProfile | None) -> None:
        """Persist credential and profile together."""

    @abstractmethod
    def clear(self) -> None:
        """Remove credential and profile together."""


class InMemoryCredentialStore(CredentialStore):
    """Keeps the session for the lifetime of the process only."""

    def __init__(self) -> None:
        self._credential: str | None = None
        self._profile: UserProfile | None = None

    def load_credential(self) -> str | None:
        return self._credential

    def load_profile(self) -> UserProfile | None:
        return self._profile

    def save(self, credential: str, profile: UserProfile | None) -> None:
        self._credential = credential
        self._profile = profile

    def clear(self) -> None:
        self._credential = None
        self._profile = None


class JsonFileCredentialStore(CredentialStore):
    """Keeps the session in a small JSON document on disk."""

    def __init__(self, path: Path | str):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load_state(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            parsed = json.loads(self._path.read_text())
        except (OSError, ValueError):
            logger.exception("Failed loading session state from '%s'.", self._path)
            return {}
        return parsed if isinstance(parsed, dict) else {}

    def load_credential(self) -> str | None:
        credential = self._load_state().get("token")
        return credential if isinstance(credential, str) and credential else None

    def load_profile(self) -> UserProfile | None:
        raw = self._load_state().get("user")
        if not isinstance(raw, dict):
            return None
        try:
            return UserProfile.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring malformed profile snapshot in '%s'.", self._path)
            return None

    def save(self, credential: str, profile: UserProfile | None) -> None:
        state = {"token": credential, "user": profile.model_dump(exclude_none=True) if profile else None}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(state, indent=2, sort_keys=True) + "\n")

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


class SessionContext:
    """Explicit session passed to every component that acts on behalf of the user.

    The identity is re-decoded from the stored credential on every access so the
    credential stays the single source of truth.
    """

    def __init__(self, store: CredentialStore, access_settings: AccessControlSettings | None = None):
        self._store = store
        self._access_settings = access_settings or AccessControlSettings()
        self._logout_listeners: list[LogoutListener] = []

    @classmethod
    def from_settings(
        cls, settings: SessionSettings, access_settings: AccessControlSettings | None = None
    ) -> "SessionContext":
        """Build a session backed by the configured storage."""
        if settings.storage_file:
            store: CredentialStore = JsonFileCredentialStore(settings.storage_file)
        else:
            store = InMemoryCredentialStore()
        return cls(store, access_settings)

    @property
    def access_settings(self) -> AccessControlSettings:
        return self._access_settings

    @property
    def credential(self) -> str | None:
        return self._store.load_credential()

    @property
    def profile(self) -> UserProfile | None:
        return self._store.load_profile()

    @property
    def identity(self) -> Identity | None:
        return decode_credential(self.credential, self._access_settings)

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    def require_credential(self) -> str:
        """Return the credential or raise :class:`NoCredentialError`."""
        credential = self.credential
        if not credential:
            raise NoCredentialError("No credential stored for this session")
        return credential

    def login(self, credential: str, profile: UserProfile | None = None) -> None:
        """Store a credential issued by the identity service."""
        if not credential or not credential.strip():
            raise NoCredentialError("Cannot start a session without a credential")
        self._store.save(credential.strip(), profile)
        identity = self.identity
        logger.info("Session started for user %s", identity.id if identity else "<unknown>")

    def add_logout_listener(self, listener: LogoutListener) -> None:
        self._logout_listeners.append(listener)

    def remove_logout_listener(self, listener: LogoutListener) -> None:
        if listener in self._logout_listeners:
            self._logout_listeners.remove(listener)

    def logout(self, reason: str = "logout") -> None:
        """Clear credential and profile, then notify listeners (e.g. a login redirect)."""
        self._store.clear()
        logger.info("Session cleared (%s)", reason)
        for listener in list(self._logout_listeners):
            listener(reason)
