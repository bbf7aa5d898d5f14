"""Core types for smsgate.

This package centralizes the message envelope, provider extensions, enums and
the adapter protocol. Most modules should import types from here rather than
directly from submodules.

Usage:
    from smsgate.types import SendRequest, SendResult, SmsAdapter
"""

from .enums import MessageType
from .extensions import (
    EXTENSION_TYPES,
    DryRunResponse,
    Extension,
    GoyyaResponse,
    ResponseParseError,
)
from .messages import SendRequest
from .protocols import SmsAdapter
from .results import SendResult

__all__ = [
    "MessageType",
    "Extension",
    "EXTENSION_TYPES",
    "GoyyaResponse",
    "DryRunResponse",
    "ResponseParseError",
    "SendRequest",
    "SendResult",
    "SmsAdapter",
]
