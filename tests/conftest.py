from __future__ import annotations

from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient

from smsgate import config as sms_config
from smsgate.config import SmsSettings

GOYYA_URL = "https://gate1.goyyamobile.com/sms/sendsms.asp"

_SMS_ENV = (
    "SMS_PROVIDER",
    "SMS_DEFAULT_SENDER",
    "SMS_DEFAULT_RECEIVER",
    "SMS_DEFAULT_MESSAGE",
    "SMS_CHARSET",
    "SMS_MAX_LENGTH_OF_ONE_SMS",
    "SMS_PROXY_HOST",
    "SMS_PROXY_PORT",
    "SMS_PROXY_USERNAME",
    "SMS_PROXY_PASSWORD",
    "GOYYA_URL",
    "GOYYA_USERNAME",
    "GOYYA_PASSWORD",
    "GOYYA_SEND_TIME_PATTERN",
    "GOYYA_DEFAULT_MESSAGE_TYPE",
    "GOYYA_INSECURE_SKIP_TLS_VERIFY",
)


@pytest.fixture(autouse=True)
def test_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("ENV", "test")
    for name in _SMS_ENV:
        monkeypatch.delenv(name, raising=False)
    # Never hit the real gateway from tests unless a test opts in
    monkeypatch.setenv("SMS_PROVIDER", "dry_run")
    sms_config.get_settings.cache_clear()
    yield
    sms_config.get_settings.cache_clear()


def make_settings(**overrides: Any) -> SmsSettings:
    """Goyya settings with test credentials and no message defaults."""
    values: dict[str, Any] = {
        "provider": "goyya",
        "url": GOYYA_URL,
        "username": "user",
        "password": "secret",
        "default_sender": None,
        "default_receiver": None,
        "default_message": None,
    }
    values.update(overrides)
    return SmsSettings(**values)


@pytest.fixture()
def client() -> TestClient:
    from server.app import app

    return TestClient(app)
