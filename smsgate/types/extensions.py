from __future__ import annotations

import traceback
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


SUCCESS_PREFIX = "OK"


class ResponseParseError(BaseModel):
    """Diagnostic captured when the gateway response could not be parsed.

    Attributes:
        message: `str()` of the exception raised during extraction.
        stack_trace: The formatted traceback of that exception.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    message: Optional[str] = None
    stack_trace: Optional[str] = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ResponseParseError":
        return cls(
            message=str(exc),
            stack_trace="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        )


class GoyyaResponse(BaseModel):
    """Goyya-specific extension attached to a `SendResult`.

    Holds the raw gateway text together with whatever could be extracted from
    it. `ok` only looks at the raw text, so a response whose payload failed to
    parse can still be a successful send.

    Example:
        >>> from smsgate.adapters.goyya import parse_gateway_response
        >>> parse_gateway_response("OK(12345, 1 message queued)").count
        1
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    kind: Literal["goyya"] = "goyya"
    response: Optional[str] = None
    id: Optional[str] = None
    count: Optional[int] = None
    parse_error: Optional[ResponseParseError] = None

    @property
    def ok(self) -> bool:
        return self.response is not None and self.response.startswith(SUCCESS_PREFIX)


class DryRunResponse(BaseModel):
    """Marks a result produced by the dry-run backend (nothing was sent)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    kind: Literal["dry_run"] = "dry_run"
    detail: str = ""


# Tagged union of every known extension; `kind` selects the variant.
Extension = Annotated[
    Union[GoyyaResponse, DryRunResponse],
    Field(discriminator="kind"),
]

EXTENSION_TYPES: tuple[type[BaseModel], ...] = (GoyyaResponse, DryRunResponse)
