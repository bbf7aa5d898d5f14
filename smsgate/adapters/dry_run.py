"""Dry-run SMS backend.

This backend never sends anything. It returns a successful result so code
paths can be exercised where no gateway is configured.
"""

from __future__ import annotations

import logging
from typing import Optional

from smsgate.config import SmsSettings, get_settings
from smsgate.types import DryRunResponse, SendRequest, SendResult, SmsAdapter

logger = logging.getLogger(__name__)


class DryRunClient(SmsAdapter):
    def __init__(self, settings: Optional[SmsSettings] = None) -> None:
        self.settings = settings or get_settings()

    def send_endpoint(self) -> str:  # type: ignore[override]
        return "dry-run://"

    def send_sms(self, request: SendRequest) -> SendResult:  # type: ignore[override]
        # No side effects. Never raises. Never calls external services.
        s = self.settings
        resolved = request.with_defaults(
            sender=s.default_sender,
            receiver=s.default_receiver,
            message=s.default_message,
        )
        logger.warning("THIS IS ONLY A DRY-RUN SMS SERVICE - SMS %s WAS NOT SENT", request.request_id)
        detail = (
            "DRY_RUN: SMS delivery simulated (not sent). "
            f"receiver={resolved.receiver} request_id={request.request_id}"
        )
        return SendResult(
            request=request,
            successfully_sent=True,
            extension=DryRunResponse(detail=detail),
        )
