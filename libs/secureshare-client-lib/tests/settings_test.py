import importlib
import warnings

import pytest
from pydantic import PydanticDeprecatedSince20, ValidationError

from secureshare_client_lib.impl.settings import (
    access_control_settings,
    api_settings,
    logging_settings,
    session_settings,
)
from secureshare_client_lib.impl.settings.access_control_settings import AccessControlSettings
from secureshare_client_lib.impl.settings.api_settings import SecureShareApiSettings
from secureshare_client_lib.impl.settings.logging_settings import LoggingSettings
from secureshare_client_lib.impl.settings.session_settings import SessionSettings


def test_api_settings_defaults():
    settings = SecureShareApiSettings()
    assert settings.base_url == "https://docsecure-backend.onrender.com"
    assert settings.api_url == "https://docsecure-backend.onrender.com/api"
    assert settings.timeout_seconds == 10.0
    assert settings.verify_tls is True


def test_api_settings_from_env(monkeypatch):
    monkeypatch.setenv("SECURESHARE_API_BASE_URL", " http://localhost:5000/ ")
    monkeypatch.setenv("SECURESHARE_API_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("SECURESHARE_API_VERIFY_TLS", "false")

    settings = SecureShareApiSettings()

    assert settings.api_url == "http://localhost:5000/api"
    assert settings.timeout_seconds == 2.5
    assert settings.verify_tls is False


@pytest.mark.parametrize("kwargs", [{"base_url": "  "}, {"timeout_seconds": 0}, {"timeout_seconds": -1}])
def test_api_settings_rejects_invalid_values(kwargs):
    with pytest.raises(ValidationError):
        SecureShareApiSettings(**kwargs)


def test_access_control_settings_from_env(monkeypatch):
    monkeypatch.setenv("ACCESS_CONTROL_ADMIN_ROLE", "auditor")
    monkeypatch.setenv("ACCESS_CONTROL_USER_ID_CLAIMS", '["sub", "userId"]')

    settings = AccessControlSettings()

    assert settings.admin_role == "auditor"
    assert settings.user_id_claims == ["sub", "userId"]
    assert settings.roles_claim == "roles"


@pytest.mark.parametrize("kwargs", [{"admin_role": " "}, {"user_id_claims": []}, {"user_id_claims": ["", " "]}])
def test_access_control_settings_rejects_invalid_values(kwargs):
    with pytest.raises(ValidationError):
        AccessControlSettings(**kwargs)


def test_session_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("SECURESHARE_SESSION_STORAGE_FILE", str(tmp_path / "session.json"))
    assert SessionSettings().storage_file.endswith("session.json")


@pytest.mark.parametrize("module", [access_control_settings, api_settings, logging_settings, session_settings])
def test_settings_modules_use_current_config_style(module):
    with warnings.catch_warnings():
        warnings.simplefilter("error", PydanticDeprecatedSince20)
        importlib.reload(module)


def test_logging_settings_normalize_level(monkeypatch):
    monkeypatch.setenv("LOGGING_LEVEL", "debug")
    assert LoggingSettings().level == "DEBUG"


def test_logging_settings_reject_unknown_level():
    with pytest.raises(ValidationError):
        LoggingSettings(level="chatty")
