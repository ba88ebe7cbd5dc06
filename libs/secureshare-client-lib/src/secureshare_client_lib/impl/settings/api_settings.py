"""Settings for the SecureShare REST API."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SecureShareApiSettings(BaseSettings):
    """Configuration required to talk to the document store API."""

    model_config = SettingsConfigDict(env_prefix="SECURESHARE_API_", case_sensitive=False)

    base_url: str = Field(
        default="https://docsecure-backend.onrender.com",
        description="Base URL of the SecureShare backend, without the /api suffix.",
    )
    timeout_seconds: float = Field(default=10.0, description="Timeout for every HTTP call to the backend.")
    verify_tls: bool = Field(default=True, description="Verify TLS certificates of the backend.")

    @field_validator("base_url")
    @classmethod
    def _validate_base_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("SECURESHARE_API_BASE_URL must not be empty.")
        return value

    @field_validator("timeout_seconds")
    @classmethod
    def _validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("SECURESHARE_API_TIMEOUT_SECONDS must be positive.")
        return value

    @property
    def api_url(self) -> str:
        """Return the root URL of the REST endpoints."""

        return f"{self.base_url}/api"
