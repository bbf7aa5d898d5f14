from __future__ import annotations

from enum import Enum


class MessageType(str, Enum):
    """Goyya message types, sent as the `msgtype` query parameter.

    TEXT and LONG_TEXT are picked automatically from the message length when
    either of them (or nothing) is configured as the default type. BLINK and
    FLASH are always sent as configured.

    Example:
        >>> from smsgate.types import MessageType
        >>> MessageType("f") is MessageType.FLASH
        True
    """

    TEXT = "t"
    LONG_TEXT = "c"
    BLINK = "b"
    FLASH = "f"

    @property
    def is_auto(self) -> bool:
        return self in (MessageType.TEXT, MessageType.LONG_TEXT)
