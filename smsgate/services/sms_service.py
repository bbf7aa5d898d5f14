"""SMS service facade.

Callers that only know some of sender, receiver, message and send time use
the shortcut methods; all of them end up in `SmsService.send_sms`, which
applies the configured defaults, delegates to the adapter and logs the
outcome.

Usage:
    >>> from smsgate.services import build_sms_service
    >>> service = build_sms_service()
    >>> result = service.send_to("0123456789", "Hello")
    >>> result.successfully_sent
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from smsgate.adapters.registry import AdapterRegistry
from smsgate.config import SmsSettings, get_settings
from smsgate.errors import SmsConfigurationError
from smsgate.types import SendRequest, SendResult, SmsAdapter

logger = logging.getLogger(__name__)


class SmsService:
    def __init__(self, settings: SmsSettings, adapter: SmsAdapter) -> None:
        self.settings = settings
        self.adapter = adapter

    def send_default(self) -> SendResult:
        """Send the default message from the default sender to the default receiver."""
        return self.send_from(None, None, None)

    def send_message(self, message: Optional[str]) -> SendResult:
        """Send a message from the default sender to the default receiver."""
        return self.send_from(None, None, message)

    def send_to(
        self,
        receiver: Optional[str],
        message: Optional[str],
        send_time: Optional[datetime] = None,
    ) -> SendResult:
        """Send a message from the default sender, optionally at a later time."""
        return self.send_from(None, receiver, message, send_time)

    def send_from(
        self,
        sender: Optional[str],
        receiver: Optional[str],
        message: Optional[str],
        send_time: Optional[datetime] = None,
    ) -> SendResult:
        return self.send_sms(
            SendRequest(sender=sender, receiver=receiver, message=message, send_time=send_time)
        )

    def send_sms(self, request: SendRequest) -> SendResult:
        """Send the SMS described by `request`.

        Raises:
            SmsConfigurationError: `request` is None, or a required field is
                blank and has no configured default.
            SmsSendError: the backend could not reach the provider.
        """
        if request is None:
            raise SmsConfigurationError("request must not be None")

        s = self.settings
        resolved = request.with_defaults(
            sender=s.default_sender,
            receiver=s.default_receiver,
            message=s.default_message,
        )

        logger.info(
            "Sending SMS %s from %s to %s", request.request_id, resolved.sender, resolved.receiver
        )
        # The result refers to the request as the caller built it
        result = self.adapter.send_sms(resolved).model_copy(update={"request": request})
        if result.successfully_sent:
            logger.info("SMS %s was successfully sent: %s", request.request_id, result.extension)
        else:
            logger.warning("SMS %s was NOT successfully sent: %s", request.request_id, result.extension)
        return result


def build_sms_service(settings: Optional[SmsSettings] = None) -> SmsService:
    """Create a service using the adapter named by `settings.provider`."""
    settings = settings or get_settings()
    adapter = AdapterRegistry.get(settings.provider, settings)
    return SmsService(settings=settings, adapter=adapter)
