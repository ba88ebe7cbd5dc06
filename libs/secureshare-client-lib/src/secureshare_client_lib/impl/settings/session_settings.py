"""Settings for the local session storage."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SessionSettings(BaseSettings):
    """Where the bearer credential and profile snapshot are kept between runs."""

    model_config = SettingsConfigDict(env_prefix="SECURESHARE_SESSION_", case_sensitive=False)

    storage_file: str = Field(
        default="",
        description="JSON file holding the credential and profile; empty keeps the session in memory.",
    )
