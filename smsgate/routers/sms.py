from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from smsgate.errors import SmsConfigurationError, SmsSendError
from smsgate.services import SmsService, build_sms_service
from smsgate.types import SendRequest, SendResult

router = APIRouter(prefix="/sms", tags=["sms"])


class SendSmsBody(BaseModel):
    """Body of `POST /sms/send`. Omitted fields use the configured defaults.

    Example:
        {
          "receiver": "0123456789",
          "message": "Hello",
          "sendTime": "2026-10-17T18:00:00+02:00"
        }
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sender: Optional[str] = None
    receiver: Optional[str] = None
    message: Optional[str] = None
    send_time: Optional[datetime] = None


class SendSmsResponse(BaseModel):
    """Standard response for the send endpoint.

    Attributes:
        ok: Mirrors `result.successfully_sent`.
        result: The `SendResult`, serialized with camelCase keys.
    """

    ok: bool
    result: SendResult


def get_sms_service() -> SmsService:
    return build_sms_service()


@router.post("/send")
def send_sms(
    body: SendSmsBody,
    service: SmsService = Depends(get_sms_service),
) -> SendSmsResponse:
    request = SendRequest(
        sender=body.sender,
        receiver=body.receiver,
        message=body.message,
        send_time=body.send_time,
    )
    try:
        result = service.send_sms(request)
    except SmsConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SmsSendError as e:
        raise HTTPException(status_code=502, detail=f"Send error: {e}")
    return SendSmsResponse(ok=result.successfully_sent, result=result)
