"""
Read-only view of registry contents joined with live processor state.

The snapshot is best-effort: a failed lookup degrades only the entry it
concerns. An account that cannot be retrieved is reported as
``{id, error}``; a balance that cannot be retrieved is left out entirely,
so callers can tell "no balance" from "balance unavailable".
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from connect_platform.engine.errors import gateway_call
from connect_platform.models.processor import BalanceAmount
from connect_platform.providers.base import ProcessorGateway
from connect_platform.providers.errors import GatewayError
from connect_platform.registry import AccountRegistry

logger = logging.getLogger("connect_platform.state")


@dataclass
class AccountStatus:
    """Live status of one registered account, or the error that hid it."""

    id: str
    charges_enabled: Optional[bool] = None
    payouts_enabled: Optional[bool] = None
    requirements_due: Optional[list[str]] = None
    transfers_status: Optional[str] = None
    error: Optional[str] = None


@dataclass
class StateSnapshot:
    accounts: list[AccountStatus] = field(default_factory=list)
    treasury: Optional[AccountStatus] = None
    root_url: str = ""
    platform_balance: Optional[dict[str, int]] = None
    platform_balance_pending: Optional[dict[str, int]] = None


@dataclass
class PlatformBalance:
    available: list[BalanceAmount]
    pending: list[BalanceAmount]


class StateAggregator:
    def __init__(self, gateway: ProcessorGateway, registry: AccountRegistry, root_url: str = ""):
        self.gateway = gateway
        self.registry = registry
        self.root_url = root_url

    async def _account_status(self, account_id: str, treasury: bool = False) -> AccountStatus:
        try:
            account = await self.gateway.retrieve_account(account_id)
        except GatewayError as e:
            logger.warning("State: could not retrieve account %s: %s", account_id, e)
            return AccountStatus(id=account_id, error=str(e))
        except Exception as e:
            logger.exception("State: unexpected failure retrieving account %s", account_id)
            return AccountStatus(id=account_id, error=str(e) or type(e).__name__)

        if treasury:
            return AccountStatus(
                id=account.id,
                charges_enabled=account.charges_enabled,
                payouts_enabled=account.payouts_enabled,
                transfers_status=account.transfers_status,
            )
        return AccountStatus(
            id=account.id,
            charges_enabled=account.charges_enabled,
            payouts_enabled=account.payouts_enabled,
            requirements_due=list(account.requirements_due),
        )

    async def snapshot(self) -> StateSnapshot:
        """Compose registry ids with live account and balance state."""
        snapshot = StateSnapshot(root_url=self.root_url or "")

        for account_id in self.registry.account_ids():
            snapshot.accounts.append(await self._account_status(account_id))

        treasury_id = self.registry.get_treasury()
        if treasury_id:
            snapshot.treasury = await self._account_status(treasury_id, treasury=True)

        try:
            balance = await self.gateway.retrieve_balance()
        except GatewayError as e:
            logger.warning("State: platform balance unavailable: %s", e)
        except Exception:
            logger.exception("State: unexpected failure retrieving platform balance")
        else:
            snapshot.platform_balance = balance.available_by_currency()
            snapshot.platform_balance_pending = balance.pending_by_currency()

        return snapshot

    async def platform_balance(self) -> PlatformBalance:
        """Raw per-currency platform balance entries."""
        with gateway_call("Unable to retrieve platform balance", use_processor_codes=False):
            balance = await self.gateway.retrieve_balance()
        return PlatformBalance(available=balance.available, pending=balance.pending)
