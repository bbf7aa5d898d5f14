from __future__ import annotations


class SmsError(Exception):
    """Base class for errors raised by smsgate."""


class SmsConfigurationError(SmsError, ValueError):
    """A required value is missing and no default is configured.

    Raised before any network call is made. Callers should fix their
    configuration or request; retrying will not help.
    """


class SmsSendError(SmsError):
    """Sending failed on the transport level (connect, TLS, read)."""
