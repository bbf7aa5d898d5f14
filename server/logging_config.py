"""Logging setup for the smsgate server.

``LOG_LEVEL`` applies to the ``smsgate`` loggers. ``GATEWAY_LOG_LEVEL``
overrides it for the provider adapters only; at DEBUG they log every raw
gateway answer.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from .config import get_settings

logger = logging.getLogger("smsgate.server")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _level(name: Optional[str], default: int) -> int:
    if not name:
        return default
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else default


def configure_logging(level: Optional[str] = None) -> None:
    """Install the root handler and set the levels of the smsgate loggers."""
    app_level = _level(level or get_settings().log_level, logging.INFO)

    # No-op when a handler is already installed (uvicorn, pytest)
    logging.basicConfig(level=app_level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    logging.getLogger("smsgate").setLevel(app_level)
    logging.getLogger("smsgate.adapters").setLevel(
        _level(os.getenv("GATEWAY_LOG_LEVEL"), app_level)
    )

    # The gateway URL carries credentials in its query string
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
