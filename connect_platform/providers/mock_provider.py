"""
Mock processor gateway for offline demos and tests.

Simulates Stripe Connect behavior in memory:
  - Configurable latency (default 100ms)
  - Configurable failure rate (default 5%)
  - Rate limiting simulation (429s)
  - Realistic object IDs (acct_, pi_, tr_)
  - Capability lifecycle: requested transfers start "inactive" until activated
  - Balance is debited by transfers and rejects overdrafts

Tests drive it through the helpers at the bottom of the class
(``add_account``, ``activate_capability``, ``set_balance``, ``inject_failure``)
and inspect ``calls`` to assert which processor operations ran.
"""

import asyncio
import random
import uuid
from collections import deque
from typing import Optional

from connect_platform.config import settings
from connect_platform.models.enums import CapabilityStatus
from connect_platform.models.processor import (
    Account,
    AccountLink,
    BalanceAmount,
    BalanceSnapshot,
    PaymentIntent,
    Transfer,
)
from connect_platform.providers.base import (
    AccountSpec,
    PaymentIntentSpec,
    ProcessorGateway,
    TransferSpec,
)
from connect_platform.providers.errors import (
    GatewayError,
    GatewayRateLimitError,
    ResourceMissingError,
)


# Most recent operations kept in ``calls``
CALL_LOG_SIZE = 1000


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


class MockProcessorGateway(ProcessorGateway):
    """In-memory processor with simulated latency and transient failures."""

    def __init__(
        self,
        failure_rate: Optional[float] = None,
        latency_ms: Optional[int] = None,
    ):
        self._failure_rate = failure_rate if failure_rate is not None else settings.mock_failure_rate
        self._latency_ms = latency_ms if latency_ms is not None else settings.mock_latency_ms

        self._accounts: dict[str, Account] = {}
        self._payment_intents: dict[str, PaymentIntent] = {}
        self._transfers: dict[str, Transfer] = {}
        self._available: dict[str, int] = {}
        self._pending: dict[str, int] = {}
        self._injected: dict[str, GatewayError] = {}

        self.calls: deque[str] = deque(maxlen=CALL_LOG_SIZE)

    @property
    def name(self) -> str:
        return "mock"

    async def _simulate(self, operation: str) -> None:
        self.calls.append(operation)

        if self._latency_ms > 0:
            jitter = random.uniform(0.5, 1.5)
            await asyncio.sleep(self._latency_ms * jitter / 1000)

        injected = self._injected.get(operation)
        if injected is not None:
            raise injected

        roll = random.random()
        if roll < self._failure_rate * 0.3:
            raise GatewayRateLimitError(
                "Mock rate limit - too many requests",
                code="rate_limit",
                http_status=429,
            )
        if roll < self._failure_rate:
            raise GatewayError(
                "Mock transient error - service temporarily unavailable",
                http_status=503,
            )

    def _get_account(self, account_id: str) -> Account:
        account = self._accounts.get(account_id)
        if account is None:
            raise ResourceMissingError(f"No such account: '{account_id}'")
        return account

    async def create_account(self, spec: AccountSpec) -> Account:
        await self._simulate("accounts.create")
        account = Account(
            id=_new_id("acct"),
            email=spec.email,
            country=spec.country or "US",
            requirements_due=["business_type", "external_account", "tos_acceptance.date"],
        )
        if spec.request_transfers:
            account.capabilities["transfers"] = CapabilityStatus.INACTIVE.value
        self._accounts[account.id] = account
        return account

    async def retrieve_account(self, account_id: str) -> Account:
        await self._simulate("accounts.retrieve")
        return self._get_account(account_id)

    async def update_account(self, account_id: str, request_transfers: bool = True) -> Account:
        await self._simulate("accounts.update")
        account = self._get_account(account_id)
        if request_transfers and account.capabilities.get("transfers") in (
            None,
            CapabilityStatus.UNREQUESTED.value,
        ):
            account.capabilities["transfers"] = CapabilityStatus.INACTIVE.value
        return account

    async def create_account_link(
        self,
        account_id: str,
        refresh_url: str,
        return_url: str,
    ) -> AccountLink:
        await self._simulate("account_links.create")
        self._get_account(account_id)
        return AccountLink(url=f"https://connect.mock.test/setup/e/{account_id}/{uuid.uuid4().hex[:12]}")

    async def create_payment_intent(self, spec: PaymentIntentSpec) -> PaymentIntent:
        await self._simulate("payment_intents.create")
        if spec.transfer_destination:
            destination = self._get_account(spec.transfer_destination)
            if not destination.can_receive_transfers:
                raise GatewayError(
                    f"Destination account {destination.id} lacks the transfers capability",
                    code="insufficient_capabilities_for_transfer",
                    http_status=400,
                )
        intent_id = _new_id("pi")
        intent = PaymentIntent(
            id=intent_id,
            amount=spec.amount,
            currency=spec.currency.lower(),
            status="requires_payment_method",
            client_secret=f"{intent_id}_secret_{uuid.uuid4().hex[:24]}",
            application_fee_amount=spec.application_fee_amount,
            transfer_destination=spec.transfer_destination,
            metadata=dict(spec.metadata),
        )
        self._payment_intents[intent.id] = intent
        return intent

    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        await self._simulate("payment_intents.retrieve")
        intent = self._payment_intents.get(payment_intent_id)
        if intent is None:
            raise ResourceMissingError(f"No such payment_intent: '{payment_intent_id}'")
        return intent

    async def create_transfer(self, spec: TransferSpec) -> Transfer:
        await self._simulate("transfers.create")
        self._get_account(spec.destination)
        currency = spec.currency.lower()
        available = self._available.get(currency, 0)
        if available < spec.amount:
            raise GatewayError(
                "You have insufficient available funds in your Stripe account.",
                code="balance_insufficient",
                http_status=400,
            )
        self._available[currency] = available - spec.amount
        transfer = Transfer(
            id=_new_id("tr"),
            amount=spec.amount,
            currency=currency,
            destination=spec.destination,
            description=spec.description,
        )
        self._transfers[transfer.id] = transfer
        return transfer

    async def retrieve_balance(self) -> BalanceSnapshot:
        await self._simulate("balance.retrieve")
        return BalanceSnapshot(
            available=[BalanceAmount(currency=c, amount=a) for c, a in self._available.items()],
            pending=[BalanceAmount(currency=c, amount=a) for c, a in self._pending.items()],
        )

    # ---- Test / demo helpers (not part of the gateway interface) ----

    def add_account(
        self,
        account_id: str,
        transfers: Optional[str] = CapabilityStatus.ACTIVE.value,
        charges_enabled: bool = True,
        payouts_enabled: bool = True,
    ) -> Account:
        """Seed an account that already exists on the processor side."""
        account = Account(
            id=account_id,
            charges_enabled=charges_enabled,
            payouts_enabled=payouts_enabled,
        )
        if transfers is not None:
            account.capabilities["transfers"] = transfers
        self._accounts[account_id] = account
        return account

    def activate_capability(self, account_id: str, capability: str = "transfers") -> None:
        """Simulate the account holder completing onboarding."""
        account = self._accounts[account_id]
        account.capabilities[capability] = CapabilityStatus.ACTIVE.value
        account.charges_enabled = True
        account.payouts_enabled = True
        account.requirements_due = []

    def set_balance(
        self,
        available: Optional[dict[str, int]] = None,
        pending: Optional[dict[str, int]] = None,
    ) -> None:
        self._available = {c.lower(): a for c, a in (available or {}).items()}
        self._pending = {c.lower(): a for c, a in (pending or {}).items()}

    def inject_failure(self, operation: str, error: GatewayError) -> None:
        """Make every call to ``operation`` (e.g. "balance.retrieve") raise ``error``."""
        self._injected[operation] = error

    def call_count(self, operation: str) -> int:
        return self.calls.count(operation)
