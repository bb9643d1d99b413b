"""
Connected account lifecycle: create, onboard, request capability, verify.

Accounts are created with the platform as fee payer and loss bearer and
are onboarded through processor-hosted onboarding links. Every account id
this process creates or verifies is recorded in the account registry;
one of them may be designated the treasury account, the destination for
platform fee transfers.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from connect_platform.audit.logger import log_event
from connect_platform.engine.errors import BusinessError, gateway_call
from connect_platform.engine.validation import optional_text, require_account_id
from connect_platform.models.enums import ErrorKind
from connect_platform.models.processor import Account
from connect_platform.providers.base import AccountSpec, ProcessorGateway
from connect_platform.registry import AccountRegistry

logger = logging.getLogger("connect_platform.accounts")

TREASURY_NOT_SET = "Treasury account not set"


@dataclass
class AccountSummary:
    """Result of verifying an existing account."""

    id: str
    charges_enabled: bool
    payouts_enabled: bool
    message: str


@dataclass
class TreasuryAccountResult:
    id: str
    already_exists: bool = False
    message: Optional[str] = None


@dataclass
class CapabilityRequestResult:
    account_id: str
    transfers_status: Optional[str]
    onboarding_url: str


def require_treasury(registry: AccountRegistry) -> str:
    """Return the treasury account id or fail with BAD_REQUEST."""
    treasury_id = registry.get_treasury()
    if not treasury_id:
        raise BusinessError(ErrorKind.BAD_REQUEST, TREASURY_NOT_SET)
    return treasury_id


class AccountOrchestrator:
    def __init__(
        self,
        gateway: ProcessorGateway,
        registry: AccountRegistry,
        root_url: str,
        dashboard_type: str = "express",
        request_transfers: bool = True,
        treasury_lock: Optional[asyncio.Lock] = None,
    ):
        self.gateway = gateway
        self.registry = registry
        self.root_url = root_url.rstrip("/")
        self.dashboard_type = dashboard_type
        self.request_transfers = request_transfers
        # Shared by every orchestrator serving one app
        self.treasury_lock = treasury_lock or asyncio.Lock()

    @property
    def refresh_url(self) -> str:
        return f"{self.root_url}/refresh"

    @property
    def return_url(self) -> str:
        return f"{self.root_url}/return"

    def _account_spec(self, email: Optional[str] = None, country: Optional[str] = None) -> AccountSpec:
        return AccountSpec(
            dashboard_type=self.dashboard_type,
            request_transfers=self.request_transfers,
            email=optional_text(email),
            country=optional_text(country),
        )

    async def create_account(self) -> str:
        """Create a connected account and register it."""
        with gateway_call("Unable to create account"):
            account = await self.gateway.create_account(self._account_spec())

        self.registry.add(account.id)
        log_event("account_created", account_id=account.id, details={
            "transfers": account.transfers_status,
        })
        return account.id

    async def create_treasury_account(
        self,
        email: Optional[str] = None,
        country: Optional[str] = None,
    ) -> TreasuryAccountResult:
        """
        Create the treasury account, or return the existing one.

        No processor call is made when a treasury account is already set.
        Concurrent calls are serialised, so at most one account is created.
        """
        async with self.treasury_lock:
            existing = self.registry.get_treasury()
            if existing:
                logger.info("Treasury account already set: %s", existing)
                return TreasuryAccountResult(
                    id=existing,
                    already_exists=True,
                    message="Treasury account already exists",
                )

            with gateway_call("Unable to create treasury account"):
                account = await self.gateway.create_account(self._account_spec(email, country))

            self.registry.set_treasury(account.id)
        log_event("treasury_created", account_id=account.id, details={
            "country": account.country,
            "transfers": account.transfers_status,
        })
        return TreasuryAccountResult(id=account.id)

    async def _onboarding_url(self, account_id: str) -> str:
        with gateway_call("Unable to create onboarding link"):
            link = await self.gateway.create_account_link(
                account_id,
                refresh_url=self.refresh_url,
                return_url=self.return_url,
            )
        return link.url

    async def issue_onboarding_link(self, account_id: Optional[str]) -> str:
        """Issue a fresh onboarding link for a connected account."""
        account_id = require_account_id(account_id)

        # Always refetch so the link reflects current capability state
        with gateway_call("Unable to retrieve account"):
            account = await self.gateway.retrieve_account(account_id)

        url = await self._onboarding_url(account.id)
        self.registry.add(account.id)
        log_event("onboarding_link_issued", account_id=account.id)
        return url

    async def issue_treasury_onboarding_link(self) -> str:
        treasury_id = require_treasury(self.registry)

        with gateway_call("Unable to retrieve treasury account"):
            account = await self.gateway.retrieve_account(treasury_id)

        url = await self._onboarding_url(account.id)
        log_event("treasury_onboarding_link_issued", account_id=account.id)
        return url

    async def request_transfers_capability(self) -> CapabilityRequestResult:
        """
        Request the transfers capability on the treasury account.

        A fresh onboarding link is returned alongside so the account holder
        can complete whatever requirements the capability adds.
        """
        treasury_id = require_treasury(self.registry)

        with gateway_call("Unable to request transfers capability"):
            updated = await self.gateway.update_account(treasury_id, request_transfers=True)

        url = await self._onboarding_url(updated.id)
        log_event("transfers_capability_requested", account_id=updated.id, details={
            "transfers": updated.transfers_status,
        })
        return CapabilityRequestResult(
            account_id=updated.id,
            transfers_status=updated.transfers_status,
            onboarding_url=url,
        )

    async def _retrieve_existing(self, account_id: str) -> Account:
        with gateway_call(
            "Account not found or inaccessible",
            fallback=ErrorKind.NOT_FOUND,
            use_processor_codes=False,
        ):
            return await self.gateway.retrieve_account(account_id)

    async def verify_account(self, account_id: Optional[str]) -> AccountSummary:
        """Confirm an existing account with the processor and register it."""
        account_id = require_account_id(account_id)
        account = await self._retrieve_existing(account_id)

        self.registry.add(account.id)
        log_event("account_verified", account_id=account.id)
        return AccountSummary(
            id=account.id,
            charges_enabled=account.charges_enabled,
            payouts_enabled=account.payouts_enabled,
            message="Account verified and registered",
        )

    async def verify_treasury_account(self, account_id: Optional[str]) -> AccountSummary:
        """Confirm an existing account and designate it the treasury account."""
        account_id = require_account_id(account_id, require_prefix=True)
        account = await self._retrieve_existing(account_id)

        previous = self.registry.get_treasury()
        self.registry.set_treasury(account.id)
        log_event("treasury_linked", account_id=account.id, details={"previous": previous})
        return AccountSummary(
            id=account.id,
            charges_enabled=account.charges_enabled,
            payouts_enabled=account.payouts_enabled,
            message="Treasury account linked",
        )
