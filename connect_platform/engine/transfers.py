"""
Treasury transfer guard.

Moves platform funds to the treasury account only after a fixed sequence
of pre-flight checks:

  1. Shape: positive amount, non-blank currency
  2. Destination: treasury account is set (and matches, if one was named)
  3. Capability: treasury's "transfers" capability is active
  4. Balance: platform's available balance covers the amount
  5. Execute: create the transfer

Each failed check is terminal and nothing is retried. A treasury that
cannot receive transfers reports ONBOARDING_REQUIRED even when the
balance is also short.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from connect_platform.audit.logger import log_event, log_rejection
from connect_platform.engine.accounts import require_treasury
from connect_platform.engine.errors import BusinessError, gateway_call
from connect_platform.engine.validation import optional_text, require_currency, require_positive_amount
from connect_platform.models.enums import ErrorKind
from connect_platform.models.processor import TransferRequest
from connect_platform.providers.base import ProcessorGateway, TransferSpec
from connect_platform.registry import AccountRegistry

logger = logging.getLogger("connect_platform.transfers")


@dataclass
class TransferResult:
    id: str
    amount: int
    currency: str
    destination: str


class TransferGuard:
    def __init__(self, gateway: ProcessorGateway, registry: AccountRegistry):
        self.gateway = gateway
        self.registry = registry

    def _resolve_destination(self, requested: Optional[str]) -> str:
        treasury_id = require_treasury(self.registry)
        requested = optional_text(requested)
        if requested is not None and requested != treasury_id:
            raise BusinessError(
                ErrorKind.BAD_REQUEST,
                "destination_account_id does not match the treasury account",
                details={"destination_account_id": requested},
            )
        return treasury_id

    async def _check_capability(self, treasury_id: str) -> None:
        with gateway_call("Unable to check treasury account capabilities"):
            account = await self.gateway.retrieve_account(treasury_id)

        if not account.can_receive_transfers:
            raise BusinessError(
                ErrorKind.ONBOARDING_REQUIRED,
                "Treasury account cannot receive transfers yet (capability 'transfers' "
                f"is {account.transfers_status or 'not requested'}). "
                "Complete onboarding and outstanding requirements first.",
                details={"account_id": treasury_id, "transfers_status": account.transfers_status},
            )

    async def _check_balance(self, amount: int, currency: str) -> None:
        with gateway_call("Unable to retrieve platform balance"):
            balance = await self.gateway.retrieve_balance()

        available = balance.available_in(currency)
        if available < amount:
            raise BusinessError(
                ErrorKind.INSUFFICIENT_FUNDS,
                f"Insufficient platform balance in {currency} "
                f"(available={available}, requested={amount}).",
                details={
                    "available_by_currency": {currency: available},
                    "requested": amount,
                    "currency": currency,
                },
            )

    async def transfer_to_treasury(self, req: TransferRequest) -> TransferResult:
        """
        Transfer platform funds to the treasury account.

        Raises:
            BusinessError: BAD_REQUEST, ONBOARDING_REQUIRED, INSUFFICIENT_FUNDS,
                RATE_LIMITED or PROCESSOR_API_ERROR depending on which step failed.
        """
        amount = require_positive_amount(req.amount)
        currency = require_currency(req.currency).lower()
        treasury_id = self._resolve_destination(req.destination_account_id)

        try:
            await self._check_capability(treasury_id)
            await self._check_balance(amount, currency)
        except BusinessError as e:
            log_rejection("transfer_rejected", e, account_id=treasury_id)
            raise

        spec = TransferSpec(
            amount=amount,
            currency=currency,
            destination=treasury_id,
            description=optional_text(req.description),
        )
        with gateway_call("Unable to create transfer"):
            transfer = await self.gateway.create_transfer(spec)

        log_event("transfer_created", account_id=treasury_id, details={
            "transfer_id": transfer.id,
            "amount": transfer.amount,
            "currency": transfer.currency,
        })
        logger.info("Transferred %d %s to treasury %s (%s)", amount, currency, treasury_id, transfer.id)

        return TransferResult(
            id=transfer.id,
            amount=transfer.amount,
            currency=transfer.currency,
            destination=transfer.destination,
        )
