"""Settings package exports for secureshare_client_lib."""

from .access_control_settings import AccessControlSettings
from .api_settings import SecureShareApiSettings
from .logging_settings import LoggingSettings
from .session_settings import SessionSettings

__all__ = [
    "AccessControlSettings",
    "LoggingSettings",
    "SecureShareApiSettings",
    "SessionSettings",
]
