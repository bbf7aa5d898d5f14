from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .extensions import Extension


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class SendRequest(BaseModel):
    """A single SMS to send.

    Every addressing field is optional; blanks are filled from the configured
    defaults by the service or the gateway client. The request is frozen once
    built, use `with_defaults` to get a completed copy.

    Anatomy:
    - request_id: random token used to correlate logs and results
    - sender / receiver: name or number (Goyya allows a-z, A-Z and 0-9)
    - message: the text body
    - send_time: schedule for later; anything within the next 60 seconds
      is sent immediately. Naive datetimes are read as UTC.
    - extension: provider-specific payload, carried through unchanged

    Example:
        >>> from smsgate.types import SendRequest
        >>> req = SendRequest(receiver="0123456789", message="Hello")
        >>> req.with_defaults(sender="bremersee").sender
        'bremersee'
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    sender: Optional[str] = None
    receiver: Optional[str] = None
    message: Optional[str] = None
    send_time: Optional[datetime] = None
    extension: Optional[Extension] = None

    @field_validator("send_time")
    @classmethod
    def _assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def with_defaults(
        self,
        *,
        sender: Optional[str] = None,
        receiver: Optional[str] = None,
        message: Optional[str] = None,
    ) -> "SendRequest":
        """Return a copy where blank fields are replaced by the given defaults.

        Fields that are blank in both places stay as they are; callers that
        need them decide whether that is an error.
        """
        updates = {}
        if _is_blank(self.sender) and not _is_blank(sender):
            updates["sender"] = sender
        if _is_blank(self.receiver) and not _is_blank(receiver):
            updates["receiver"] = receiver
        if _is_blank(self.message) and not _is_blank(message):
            updates["message"] = message
        if not updates:
            return self
        return self.model_copy(update=updates)
