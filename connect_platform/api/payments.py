"""
Payment intent endpoints.

POST /payments           - Split payment routed to a connected account.
POST /payments/platform  - Platform-only payment.
GET  /payments/{id}      - Current status of a payment intent.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import AliasChoices, BaseModel, Field

from connect_platform.api.deps import get_payment_orchestrator
from connect_platform.engine.payments import PaymentOrchestrator
from connect_platform.models.processor import PaymentIntentRequest

router = APIRouter(prefix="/payments", tags=["payments"])


class PaymentIntentIn(BaseModel):
    # Presence is checked by the orchestrator so missing fields report BAD_REQUEST
    amount: Optional[int] = None
    currency: Optional[str] = None
    destination_account_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("destination_account_id", "connected_account_id"),
    )
    application_fee_amount: Optional[int] = None
    order_id: Optional[str] = None

    def to_request(self) -> PaymentIntentRequest:
        return PaymentIntentRequest(
            amount=self.amount,
            currency=self.currency,
            destination_account_id=self.destination_account_id,
            application_fee_amount=self.application_fee_amount,
            order_id=self.order_id,
        )


class PaymentIntentCreatedOut(BaseModel):
    id: str
    client_secret: Optional[str]
    status: str

    model_config = {"from_attributes": True}


class PaymentIntentOut(BaseModel):
    id: str
    amount: int
    currency: str
    application_fee_amount: Optional[int]
    status: str

    model_config = {"from_attributes": True}


@router.post("", response_model=PaymentIntentCreatedOut)
async def create_split_payment(
    body: PaymentIntentIn,
    orchestrator: PaymentOrchestrator = Depends(get_payment_orchestrator),
):
    """Create a card payment whose funds are transferred to a connected account."""
    result = await orchestrator.create_split_payment(body.to_request())
    return PaymentIntentCreatedOut.model_validate(result)


@router.post("/platform", response_model=PaymentIntentCreatedOut)
async def create_platform_payment(
    body: PaymentIntentIn,
    orchestrator: PaymentOrchestrator = Depends(get_payment_orchestrator),
):
    result = await orchestrator.create_platform_payment(body.to_request())
    return PaymentIntentCreatedOut.model_validate(result)


@router.get("/{payment_intent_id}", response_model=PaymentIntentOut)
async def get_payment_intent(
    payment_intent_id: str,
    orchestrator: PaymentOrchestrator = Depends(get_payment_orchestrator),
):
    result = await orchestrator.get_payment_intent(payment_intent_id)
    return PaymentIntentOut.model_validate(result)
