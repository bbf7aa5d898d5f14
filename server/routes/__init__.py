"""Router aggregation."""

from __future__ import annotations

from fastapi import APIRouter

from smsgate.routers import health as health_router_module
from smsgate.routers import sms as sms_router_module

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router_module.router)
api_router.include_router(sms_router_module.router)

__all__ = ["api_router"]
