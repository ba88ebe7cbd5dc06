"""Contains settings for logging."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """
    Logging settings.

    Attributes
    ----------
    level : str
        Name of the root log level, e.g. ``INFO`` or ``DEBUG``.
    format : str
        Format string handed to :func:`logging.basicConfig`.
    """

    model_config = SettingsConfigDict(env_prefix="LOGGING_", case_sensitive=False)

    level: str = Field(default="INFO")
    format: str = Field(default="%(asctime)s %(levelname)s %(name)s: %(message)s")

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        value = value.strip().upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"Unknown log level: {value}")
        return value

    def configure(self) -> None:
        """Apply the settings to the root logger."""

        logging.basicConfig(level=self.level, format=self.format)
