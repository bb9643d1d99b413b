"""
Payment intent creation and lookup.

Two variants:
  - Split: funds routed to a connected account via transfer data, minus an
    optional application fee kept by the platform.
  - Platform: funds stay on the platform; any fee is ignored since there is
    nothing to split from.

Both restrict the intent to card payments so funds never take a delayed
settlement path.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from connect_platform.audit.logger import log_event
from connect_platform.engine.errors import gateway_call
from connect_platform.engine.validation import (
    check_application_fee,
    optional_text,
    require_currency,
    require_destination,
    require_positive_amount,
)
from connect_platform.models.enums import PaymentMode
from connect_platform.models.processor import PaymentIntent, PaymentIntentRequest
from connect_platform.providers.base import PaymentIntentSpec, ProcessorGateway

logger = logging.getLogger("connect_platform.payments")

CARD_ONLY = ["card"]


@dataclass
class CreatedPaymentIntent:
    id: str
    client_secret: Optional[str]
    status: str


@dataclass
class PaymentIntentStatus:
    id: str
    amount: int
    currency: str
    application_fee_amount: Optional[int]
    status: str


def _metadata(order_id: Optional[str]) -> dict[str, str]:
    order_id = optional_text(order_id)
    return {"order_id": order_id} if order_id else {}


class PaymentOrchestrator:
    def __init__(self, gateway: ProcessorGateway):
        self.gateway = gateway

    async def _create(self, spec: PaymentIntentSpec, mode: PaymentMode) -> CreatedPaymentIntent:
        with gateway_call("Unable to create payment intent"):
            intent = await self.gateway.create_payment_intent(spec)

        log_event("payment_intent_created", account_id=spec.transfer_destination, details={
            "payment_intent_id": intent.id,
            "mode": mode.value,
            "amount": spec.amount,
            "currency": spec.currency,
            "application_fee_amount": spec.application_fee_amount,
            **spec.metadata,
        })
        return CreatedPaymentIntent(id=intent.id, client_secret=intent.client_secret, status=intent.status)

    async def create_split_payment(self, req: PaymentIntentRequest) -> CreatedPaymentIntent:
        """Create a payment intent whose funds go to a connected account."""
        amount = require_positive_amount(req.amount)
        currency = require_currency(req.currency)
        destination = require_destination(req.destination_account_id)
        fee = check_application_fee(req.application_fee_amount)

        spec = PaymentIntentSpec(
            amount=amount,
            currency=currency,
            payment_method_types=list(CARD_ONLY),
            transfer_destination=destination,
            application_fee_amount=fee,
            metadata=_metadata(req.order_id),
        )
        return await self._create(spec, PaymentMode.SPLIT)

    async def create_platform_payment(self, req: PaymentIntentRequest) -> CreatedPaymentIntent:
        """Create a payment intent that keeps funds on the platform."""
        amount = require_positive_amount(req.amount)
        currency = require_currency(req.currency)

        if req.application_fee_amount is not None:
            logger.debug("Ignoring application fee on platform payment (no destination)")

        spec = PaymentIntentSpec(
            amount=amount,
            currency=currency,
            payment_method_types=list(CARD_ONLY),
            metadata=_metadata(req.order_id),
        )
        return await self._create(spec, PaymentMode.PLATFORM)

    async def get_payment_intent(self, payment_intent_id: str) -> PaymentIntentStatus:
        with gateway_call("Unable to retrieve payment intent", use_processor_codes=False):
            intent: PaymentIntent = await self.gateway.retrieve_payment_intent(payment_intent_id)

        return PaymentIntentStatus(
            id=intent.id,
            amount=intent.amount,
            currency=intent.currency,
            application_fee_amount=intent.application_fee_amount,
            status=intent.status,
        )
