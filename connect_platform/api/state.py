"""
Read-only platform state endpoints.

GET /api/state            - Registered accounts with live status, treasury, balances.
GET /api/balance          - Raw platform balance entries.
GET /api/checkout-config  - Publishable key and checkout parameters for the client.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from connect_platform.api.deps import get_settings, get_state_aggregator
from connect_platform.config import Settings
from connect_platform.engine.state import StateAggregator

router = APIRouter(prefix="/api", tags=["state"])


class AccountStatusOut(BaseModel):
    id: str
    charges_enabled: Optional[bool] = None
    payouts_enabled: Optional[bool] = None
    requirements_due: Optional[list[str]] = None
    transfers_status: Optional[str] = None
    error: Optional[str] = None

    model_config = {"from_attributes": True}


class StateOut(BaseModel):
    accounts: list[AccountStatusOut]
    treasury: Optional[AccountStatusOut] = None
    root_url: str
    platform_balance: Optional[dict[str, int]] = None
    platform_balance_pending: Optional[dict[str, int]] = None

    model_config = {"from_attributes": True}


class BalanceEntryOut(BaseModel):
    currency: str
    amount: int

    model_config = {"from_attributes": True}


class BalanceOut(BaseModel):
    available: list[BalanceEntryOut]
    pending: list[BalanceEntryOut]

    model_config = {"from_attributes": True}


class CheckoutConfigOut(BaseModel):
    publishable_key: str
    amount: Optional[int] = None
    currency: Optional[str] = None
    destination_account_id: Optional[str] = None
    application_fee_amount: Optional[int] = None
    order_id: Optional[str] = None


@router.get("/state", response_model=StateOut, response_model_exclude_none=True)
async def get_state(aggregator: StateAggregator = Depends(get_state_aggregator)):
    """
    Live state for every registered account.

    Best-effort: an account that cannot be retrieved appears as
    ``{id, error}``; balance fields are omitted when the balance cannot be
    retrieved.
    """
    snapshot = await aggregator.snapshot()
    return StateOut.model_validate(snapshot)


@router.get("/balance", response_model=BalanceOut)
async def get_platform_balance(aggregator: StateAggregator = Depends(get_state_aggregator)):
    balance = await aggregator.platform_balance()
    return BalanceOut.model_validate(balance)


@router.get("/checkout-config", response_model=CheckoutConfigOut, response_model_exclude_none=True)
async def get_checkout_config(
    amount: Optional[int] = Query(None),
    currency: Optional[str] = Query(None),
    destination_account_id: Optional[str] = Query(None),
    application_fee_amount: Optional[int] = Query(None),
    order_id: Optional[str] = Query(None),
    config: Settings = Depends(get_settings),
):
    """Parameters a client checkout page needs to confirm a payment."""
    return CheckoutConfigOut(
        publishable_key=config.stripe_publishable_key,
        amount=amount,
        currency=currency,
        destination_account_id=destination_account_id,
        application_fee_amount=application_fee_amount,
        order_id=order_id,
    )
