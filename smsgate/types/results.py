from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from .extensions import Extension, GoyyaResponse
from .messages import SendRequest


class SendResult(BaseModel):
    """Standardized result returned by adapters after attempting to send.

    Attributes:
        request: The request that was sent, with defaults applied.
        successfully_sent: Whether the provider accepted the message.
        extension: Provider response details (`GoyyaResponse`, `DryRunResponse`).

    A Goyya extension decides success: `successfully_sent` must equal
    `extension.ok`, otherwise validation fails.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    request: Optional[SendRequest] = None
    successfully_sent: bool = False
    extension: Optional[Extension] = None

    @model_validator(mode="after")
    def _success_matches_gateway(self) -> "SendResult":
        if isinstance(self.extension, GoyyaResponse) and self.extension.ok != self.successfully_sent:
            raise ValueError(
                "successfully_sent must match the gateway response "
                f"(response={self.extension.response!r})"
            )
        return self
