"""Utility functions for smsgate."""

from .serialization import (
    request_from_json,
    request_from_xml,
    result_from_json,
    result_from_xml,
    to_json,
    to_xml,
    transform_extension,
)

__all__ = [
    "request_from_json",
    "request_from_xml",
    "result_from_json",
    "result_from_xml",
    "to_json",
    "to_xml",
    "transform_extension",
]
