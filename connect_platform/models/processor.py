"""Typed records exchanged with the payment processor.

Gateways decode processor responses into these dataclasses so the engine
never touches SDK objects directly.
"""

from dataclasses import dataclass, field
from typing import Optional

from connect_platform.models.enums import CapabilityStatus


@dataclass
class Account:
    """A connected account as reported live by the processor."""

    id: str
    charges_enabled: bool = False
    payouts_enabled: bool = False
    capabilities: dict[str, str] = field(default_factory=dict)  # {"transfers": "active"}
    requirements_due: list[str] = field(default_factory=list)
    email: Optional[str] = None
    country: Optional[str] = None

    @property
    def transfers_status(self) -> Optional[str]:
        return self.capabilities.get("transfers")

    @property
    def can_receive_transfers(self) -> bool:
        status = self.transfers_status or ""
        return status.lower() == CapabilityStatus.ACTIVE.value


@dataclass
class AccountLink:
    """Single-use onboarding URL."""

    url: str
    expires_at: Optional[int] = None


@dataclass
class PaymentIntent:
    id: str
    amount: int
    currency: str
    status: str
    client_secret: Optional[str] = None
    application_fee_amount: Optional[int] = None
    transfer_destination: Optional[str] = None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass
class Transfer:
    id: str
    amount: int
    currency: str
    destination: str
    description: Optional[str] = None


@dataclass
class BalanceAmount:
    """One per-currency entry of the platform balance."""

    currency: str
    amount: int  # Smallest currency unit


@dataclass
class BalanceSnapshot:
    """Live platform balance. Never cached."""

    available: list[BalanceAmount] = field(default_factory=list)
    pending: list[BalanceAmount] = field(default_factory=list)

    @staticmethod
    def _by_currency(entries: list[BalanceAmount]) -> dict[str, int]:
        totals: dict[str, int] = {}
        for entry in entries:
            key = entry.currency.lower()
            totals[key] = totals.get(key, 0) + entry.amount
        return totals

    def available_by_currency(self) -> dict[str, int]:
        return self._by_currency(self.available)

    def pending_by_currency(self) -> dict[str, int]:
        return self._by_currency(self.pending)

    def available_in(self, currency: str) -> int:
        """Available amount for a currency, 0 when the currency has no entry."""
        return self.available_by_currency().get(currency.lower(), 0)


@dataclass
class PaymentIntentRequest:
    """Inbound request to create a payment intent."""

    amount: Optional[int]
    currency: Optional[str]
    destination_account_id: Optional[str] = None
    application_fee_amount: Optional[int] = None
    order_id: Optional[str] = None


@dataclass
class TransferRequest:
    """Inbound request to move platform funds to the treasury account."""

    amount: Optional[int]
    currency: Optional[str]
    destination_account_id: Optional[str] = None
    description: Optional[str] = None
