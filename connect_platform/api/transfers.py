"""
Treasury transfer endpoint.

POST /transfers/treasury - Move platform funds to the treasury account after
capability and balance pre-checks.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from connect_platform.api.deps import get_transfer_guard
from connect_platform.engine.transfers import TransferGuard
from connect_platform.models.processor import TransferRequest

router = APIRouter(prefix="/transfers", tags=["transfers"])


class TransferIn(BaseModel):
    amount: Optional[int] = None
    currency: Optional[str] = None
    destination_account_id: Optional[str] = None
    description: Optional[str] = None


class TransferOut(BaseModel):
    id: str
    amount: int
    currency: str
    destination: str

    model_config = {"from_attributes": True}


@router.post("/treasury", response_model=TransferOut)
async def transfer_to_treasury(body: TransferIn, guard: TransferGuard = Depends(get_transfer_guard)):
    result = await guard.transfer_to_treasury(
        TransferRequest(
            amount=body.amount,
            currency=body.currency,
            destination_account_id=body.destination_account_id,
            description=body.description,
        )
    )
    return TransferOut.model_validate(result)
