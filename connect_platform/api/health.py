"""
Health and onboarding callback endpoints.

GET /health   - Liveness and configured processor backend.
GET /return   - Landing point after an account holder finishes onboarding.
GET /refresh  - Landing point when an onboarding link expired or was reused.
"""

from fastapi import APIRouter, Depends

from connect_platform.api.deps import get_gateway
from connect_platform.providers.base import ProcessorGateway

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(gateway: ProcessorGateway = Depends(get_gateway)):
    return {"status": "ok", "processor": gateway.name}


@router.get("/return")
async def onboarding_return():
    return {"status": "returned", "message": "Onboarding session finished. Check /api/state for account status."}


@router.get("/refresh")
async def onboarding_refresh():
    return {"status": "expired", "message": "Onboarding link expired. Request a new one to continue."}
