"""SMS gateway settings, read from the environment."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from smsgate.types import MessageType


DEFAULT_GOYYA_URL = "https://gate1.goyyamobile.com/sms/sendsms.asp"
DEFAULT_CHARSET = "ISO-8859-1"
DEFAULT_MAX_LENGTH_OF_ONE_SMS = 153
# HHmmddMMyyyy
DEFAULT_SEND_TIME_PATTERN = "%H%M%d%m%Y"


def _env(name: str, fallback: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return fallback
    return value.strip()


def _env_int(name: str, fallback: Optional[int]) -> Optional[int]:
    try:
        return int(os.getenv(name, str(fallback)))
    except (TypeError, ValueError):
        return fallback


def _env_bool(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


class SmsSettings(BaseModel):
    """Immutable configuration for the SMS service and its backends.

    Build one at startup (or call `get_settings()`) and pass it into the
    service; there are no setters, so concurrent sends always see the same
    values.
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    # Backend selection (see AdapterRegistry)
    provider: str = Field(default_factory=lambda: _env("SMS_PROVIDER", "goyya"))

    # Message defaults
    default_sender: Optional[str] = Field(default_factory=lambda: _env("SMS_DEFAULT_SENDER"))
    default_receiver: Optional[str] = Field(default_factory=lambda: _env("SMS_DEFAULT_RECEIVER"))
    default_message: Optional[str] = Field(default_factory=lambda: _env("SMS_DEFAULT_MESSAGE"))
    charset: str = Field(default_factory=lambda: _env("SMS_CHARSET", DEFAULT_CHARSET))
    max_length_of_one_sms: int = Field(
        default_factory=lambda: _env_int("SMS_MAX_LENGTH_OF_ONE_SMS", DEFAULT_MAX_LENGTH_OF_ONE_SMS)
    )

    # Goyya gateway
    url: str = Field(default_factory=lambda: _env("GOYYA_URL", DEFAULT_GOYYA_URL))
    username: Optional[str] = Field(default_factory=lambda: _env("GOYYA_USERNAME"))
    password: Optional[str] = Field(default_factory=lambda: _env("GOYYA_PASSWORD"))
    send_time_pattern: str = Field(
        default_factory=lambda: _env("GOYYA_SEND_TIME_PATTERN", DEFAULT_SEND_TIME_PATTERN)
    )
    default_message_type: Optional[MessageType] = Field(
        default_factory=lambda: _env("GOYYA_DEFAULT_MESSAGE_TYPE", MessageType.TEXT.value)
    )
    # Accept any certificate and host name. Only for legacy gateways.
    insecure_skip_tls_verify: bool = Field(
        default_factory=lambda: _env_bool("GOYYA_INSECURE_SKIP_TLS_VERIFY")
    )

    # HTTP proxy
    proxy_host: Optional[str] = Field(default_factory=lambda: _env("SMS_PROXY_HOST"))
    proxy_port: Optional[int] = Field(default_factory=lambda: _env_int("SMS_PROXY_PORT", None))
    proxy_username: Optional[str] = Field(default_factory=lambda: _env("SMS_PROXY_USERNAME"))
    proxy_password: Optional[str] = Field(default_factory=lambda: _env("SMS_PROXY_PASSWORD"))

    @field_validator("default_message_type", mode="before")
    @classmethod
    def _normalize_message_type(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @field_validator("charset", "send_time_pattern", mode="before")
    @classmethod
    def _blank_means_default(cls, v: object, info: ValidationInfo) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            if info.field_name == "charset":
                return DEFAULT_CHARSET
            return DEFAULT_SEND_TIME_PATTERN
        return v

    @property
    def uses_proxy(self) -> bool:
        return bool(self.proxy_host and self.proxy_host.strip()) and self.proxy_port is not None


@lru_cache(maxsize=1)
def get_settings() -> SmsSettings:
    """Get cached settings instance."""
    return SmsSettings()
