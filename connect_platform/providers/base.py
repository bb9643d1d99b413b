"""
Abstract payment processor gateway.

The engine only talks to the processor through this interface. The real
implementation wraps the Stripe Connect API; the mock implementation keeps
everything in memory for offline demos and tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from connect_platform.models.processor import (
    Account,
    AccountLink,
    BalanceSnapshot,
    PaymentIntent,
    Transfer,
)


@dataclass
class AccountSpec:
    """Parameters for creating a connected account."""

    fees_payer: str = "application"  # Platform pays processing fees
    losses_payer: str = "application"  # Platform bears negative balances
    dashboard_type: str = "express"
    request_transfers: bool = True
    email: Optional[str] = None
    country: Optional[str] = None


@dataclass
class PaymentIntentSpec:
    """Parameters for creating a payment intent."""

    amount: int  # Smallest currency unit
    currency: str
    payment_method_types: list[str] = field(default_factory=lambda: ["card"])
    transfer_destination: Optional[str] = None
    application_fee_amount: Optional[int] = None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass
class TransferSpec:
    """Parameters for a platform → connected account transfer."""

    amount: int
    currency: str
    destination: str
    description: Optional[str] = None


class ProcessorGateway(ABC):
    """Abstract base class for payment processor gateways.

    Every method may raise ``GatewayError`` (or a subclass) on failure.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Gateway identifier (e.g. 'stripe')."""
        ...

    @abstractmethod
    async def create_account(self, spec: AccountSpec) -> Account:
        ...

    @abstractmethod
    async def retrieve_account(self, account_id: str) -> Account:
        ...

    @abstractmethod
    async def update_account(self, account_id: str, request_transfers: bool = True) -> Account:
        """Update an account, requesting the transfers capability."""
        ...

    @abstractmethod
    async def create_account_link(
        self,
        account_id: str,
        refresh_url: str,
        return_url: str,
    ) -> AccountLink:
        """Create a single-use ``account_onboarding`` link."""
        ...

    @abstractmethod
    async def create_payment_intent(self, spec: PaymentIntentSpec) -> PaymentIntent:
        ...

    @abstractmethod
    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        ...

    @abstractmethod
    async def create_transfer(self, spec: TransferSpec) -> Transfer:
        ...

    @abstractmethod
    async def retrieve_balance(self) -> BalanceSnapshot:
        ...
