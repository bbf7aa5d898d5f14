from __future__ import annotations

from typing import Protocol

from .messages import SendRequest
from .results import SendResult


class SmsAdapter(Protocol):
    """Protocol for SMS backends.

    Concrete implementations encapsulate provider-specific HTTP calls so the
    service facade and the HTTP layer stay provider-agnostic.

    Responsibilities:
        - Fill blank request fields from configured defaults
        - Convert `SendRequest` to the provider's wire format and send it
        - Report the outcome as a `SendResult`

    Minimal example:
        >>> from smsgate.types import SendRequest, SendResult, SmsAdapter
        >>> class EchoAdapter(SmsAdapter):
        ...     def send_endpoint(self) -> str:
        ...         return "memory://echo"
        ...     def send_sms(self, request: SendRequest) -> SendResult:
        ...         return SendResult(request=request, successfully_sent=True)
    """

    def send_endpoint(self) -> str:
        """Return the URL used for sending, without credentials."""
        ...

    def send_sms(self, request: SendRequest) -> SendResult:
        """Send one message.

        Implementations raise `SmsConfigurationError` when required fields are
        missing and `SmsSendError` on transport failures. A rejected message is
        not an exception: it comes back with `successfully_sent=False`.
        """
        ...
