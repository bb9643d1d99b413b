"""
Connected account endpoints.

POST /accounts                              - Create a connected account.
POST /accounts/treasury                     - Create (or return) the treasury account.
POST /accounts/treasury/onboard             - Onboarding link for the treasury account.
POST /accounts/treasury/request-transfers   - Request the transfers capability.
POST /accounts/treasury/verify?id=acct_...  - Link an existing account as treasury.
POST /accounts/{id}/onboard                 - Onboarding link for a connected account.
POST /accounts/{id}/verify                  - Register an existing connected account.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from connect_platform.api.deps import get_account_orchestrator
from connect_platform.engine.accounts import AccountOrchestrator

router = APIRouter(prefix="/accounts", tags=["accounts"])


class AccountCreated(BaseModel):
    id: str


class TreasuryAccountOut(BaseModel):
    id: str
    already_exists: bool = False
    message: Optional[str] = None

    model_config = {"from_attributes": True}


class OnboardingLinkOut(BaseModel):
    url: str


class CapabilityRequestOut(BaseModel):
    account_id: str
    transfers_status: Optional[str]
    onboarding_url: str

    model_config = {"from_attributes": True}


class AccountSummaryOut(BaseModel):
    id: str
    charges_enabled: bool
    payouts_enabled: bool
    message: str

    model_config = {"from_attributes": True}


@router.post("", response_model=AccountCreated)
async def create_account(orchestrator: AccountOrchestrator = Depends(get_account_orchestrator)):
    """Create a connected account managed by the platform."""
    account_id = await orchestrator.create_account()
    return AccountCreated(id=account_id)


@router.post("/treasury", response_model=TreasuryAccountOut, response_model_exclude_none=True)
async def create_treasury_account(
    email: Optional[str] = Query(None, description="Account holder email"),
    country: Optional[str] = Query(None, description="ISO 3166-1 alpha-2 country code"),
    orchestrator: AccountOrchestrator = Depends(get_account_orchestrator),
):
    """
    Create the treasury account.

    Idempotent: if a treasury account is already set, it is returned
    unchanged with ``already_exists=true``.
    """
    result = await orchestrator.create_treasury_account(email=email, country=country)
    return TreasuryAccountOut.model_validate(result)


@router.post("/treasury/onboard", response_model=OnboardingLinkOut)
async def onboard_treasury(orchestrator: AccountOrchestrator = Depends(get_account_orchestrator)):
    url = await orchestrator.issue_treasury_onboarding_link()
    return OnboardingLinkOut(url=url)


@router.post("/treasury/request-transfers", response_model=CapabilityRequestOut)
async def request_transfers(orchestrator: AccountOrchestrator = Depends(get_account_orchestrator)):
    """Request the transfers capability and return a link to finish onboarding."""
    result = await orchestrator.request_transfers_capability()
    return CapabilityRequestOut.model_validate(result)


@router.post("/treasury/verify", response_model=AccountSummaryOut)
async def verify_treasury(
    id: Optional[str] = Query(None, description="Existing account id (acct_...)"),
    orchestrator: AccountOrchestrator = Depends(get_account_orchestrator),
):
    result = await orchestrator.verify_treasury_account(id)
    return AccountSummaryOut.model_validate(result)


@router.post("/{account_id}/onboard", response_model=OnboardingLinkOut)
async def onboard_account(
    account_id: str,
    orchestrator: AccountOrchestrator = Depends(get_account_orchestrator),
):
    url = await orchestrator.issue_onboarding_link(account_id)
    return OnboardingLinkOut(url=url)


@router.post("/{account_id}/verify", response_model=AccountSummaryOut)
async def verify_account(
    account_id: str,
    orchestrator: AccountOrchestrator = Depends(get_account_orchestrator),
):
    result = await orchestrator.verify_account(account_id)
    return AccountSummaryOut.model_validate(result)
