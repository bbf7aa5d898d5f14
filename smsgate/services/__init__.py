"""Services package for smsgate."""

from .sms_service import SmsService, build_sms_service

__all__ = [
    "SmsService",
    "build_sms_service",
]
