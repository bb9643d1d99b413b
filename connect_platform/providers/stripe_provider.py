"""
Stripe Connect gateway.

Thin adapter over the official ``stripe`` SDK's async resource methods.
Responses are decoded into the typed records in ``connect_platform.models``
and SDK exceptions are translated into ``GatewayError`` subclasses so the
engine never sees a raw ``stripe`` exception.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar

import stripe

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
    CardError,
    GatewayError,
    GatewayRateLimitError,
    ResourceMissingError,
)

logger = logging.getLogger("connect_platform.stripe")

T = TypeVar("T")


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    """Re-raise Stripe SDK exceptions as gateway errors."""
    try:
        yield
    except stripe.RateLimitError as e:
        logger.warning("Stripe rate limit on %s (request=%s)", operation, e.request_id)
        raise GatewayRateLimitError(
            e.user_message or "Too many requests to the payment processor",
            code=e.code,
            request_id=e.request_id,
            http_status=e.http_status,
        ) from e
    except stripe.CardError as e:
        raise CardError(
            e.user_message or str(e),
            code=e.code,
            decline_code=getattr(e, "decline_code", None),
            request_id=e.request_id,
            http_status=e.http_status,
        ) from e
    except stripe.InvalidRequestError as e:
        if e.code == "resource_missing":
            raise ResourceMissingError(e.user_message or str(e), request_id=e.request_id) from e
        raise GatewayError(
            e.user_message or str(e),
            code=e.code,
            request_id=e.request_id,
            http_status=e.http_status,
        ) from e
    except stripe.StripeError as e:
        logger.error("Stripe error on %s: %s", operation, e)
        raise GatewayError(
            e.user_message or str(e) or "Payment processor request failed",
            code=e.code,
            request_id=e.request_id,
            http_status=e.http_status,
        ) from e


def _plain(value: Any) -> Any:
    """Convert SDK objects (and anything nested in them) to plain dicts and lists."""
    if isinstance(value, stripe.StripeObject):
        value = value.to_dict()
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def _decode(operation: str, decoder: Callable[[dict[str, Any]], T], obj: Any) -> T:
    """Decode a response, reporting a malformed one as a gateway failure."""
    try:
        return decoder(_plain(obj))
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.error("Unexpected Stripe response for %s: %r", operation, e)
        raise GatewayError(f"Unexpected response from payment processor for {operation}") from e


def _object_id(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return value.get("id")


def _to_account(obj: dict[str, Any]) -> Account:
    capabilities = obj.get("capabilities") or {}
    requirements = obj.get("requirements") or {}
    return Account(
        id=obj["id"],
        charges_enabled=bool(obj.get("charges_enabled")),
        payouts_enabled=bool(obj.get("payouts_enabled")),
        capabilities={name: str(status) for name, status in capabilities.items()},
        requirements_due=list(requirements.get("currently_due") or []),
        email=obj.get("email"),
        country=obj.get("country"),
    )


def _to_account_link(obj: dict[str, Any]) -> AccountLink:
    return AccountLink(url=obj["url"], expires_at=obj.get("expires_at"))


def _to_payment_intent(obj: dict[str, Any]) -> PaymentIntent:
    transfer_data = obj.get("transfer_data") or {}
    return PaymentIntent(
        id=obj["id"],
        amount=obj["amount"],
        currency=obj["currency"],
        status=obj["status"],
        client_secret=obj.get("client_secret"),
        application_fee_amount=obj.get("application_fee_amount"),
        transfer_destination=_object_id(transfer_data.get("destination")),
        metadata=dict(obj.get("metadata") or {}),
    )


def _to_transfer(obj: dict[str, Any]) -> Transfer:
    return Transfer(
        id=obj["id"],
        amount=obj["amount"],
        currency=obj["currency"],
        destination=_object_id(obj.get("destination")),
        description=obj.get("description"),
    )


def _to_balance_amounts(entries: Optional[list[Any]]) -> list[BalanceAmount]:
    return [
        BalanceAmount(currency=entry["currency"], amount=int(entry["amount"]))
        for entry in entries or []
        if entry is not None
    ]


def _to_balance(obj: dict[str, Any]) -> BalanceSnapshot:
    return BalanceSnapshot(
        available=_to_balance_amounts(obj.get("available")),
        pending=_to_balance_amounts(obj.get("pending")),
    )


class StripeGateway(ProcessorGateway):
    """Processor gateway backed by the Stripe API."""

    def __init__(self, secret_key: str, api_version: Optional[str] = None):
        self._options: dict[str, Any] = {"api_key": secret_key}
        if api_version:
            self._options["stripe_version"] = api_version
        # Failures surface to the caller on the first attempt
        stripe.max_network_retries = 0
        stripe.default_http_client = stripe.HTTPXClient()
        logger.info(
            "Stripe gateway initialized (mode=%s, api_version=%s)",
            "test" if secret_key.startswith("sk_test_") else "live",
            api_version or "account default",
        )

    @property
    def name(self) -> str:
        return "stripe"

    async def create_account(self, spec: AccountSpec) -> Account:
        params: dict[str, Any] = {
            "controller": {
                "fees": {"payer": spec.fees_payer},
                "losses": {"payments": spec.losses_payer},
                "stripe_dashboard": {"type": spec.dashboard_type},
            },
        }
        if spec.request_transfers:
            params["capabilities"] = {"transfers": {"requested": True}}
        if spec.email:
            params["email"] = spec.email
        if spec.country:
            params["country"] = spec.country

        with _translate_errors("accounts.create"):
            account = await stripe.Account.create_async(**params, **self._options)
        return _decode("accounts.create", _to_account, account)

    async def retrieve_account(self, account_id: str) -> Account:
        with _translate_errors("accounts.retrieve"):
            account = await stripe.Account.retrieve_async(account_id, **self._options)
        return _decode("accounts.retrieve", _to_account, account)

    async def update_account(self, account_id: str, request_transfers: bool = True) -> Account:
        with _translate_errors("accounts.update"):
            account = await stripe.Account.modify_async(
                account_id,
                capabilities={"transfers": {"requested": request_transfers}},
                **self._options,
            )
        return _decode("accounts.update", _to_account, account)

    async def create_account_link(
        self,
        account_id: str,
        refresh_url: str,
        return_url: str,
    ) -> AccountLink:
        with _translate_errors("account_links.create"):
            link = await stripe.AccountLink.create_async(
                account=account_id,
                refresh_url=refresh_url,
                return_url=return_url,
                type="account_onboarding",
                **self._options,
            )
        return _decode("account_links.create", _to_account_link, link)

    async def create_payment_intent(self, spec: PaymentIntentSpec) -> PaymentIntent:
        params: dict[str, Any] = {
            "amount": spec.amount,
            "currency": spec.currency,
            "payment_method_types": list(spec.payment_method_types),
        }
        if spec.transfer_destination:
            params["transfer_data"] = {"destination": spec.transfer_destination}
        if spec.application_fee_amount is not None:
            params["application_fee_amount"] = spec.application_fee_amount
        if spec.metadata:
            params["metadata"] = dict(spec.metadata)

        with _translate_errors("payment_intents.create"):
            intent = await stripe.PaymentIntent.create_async(**params, **self._options)
        return _decode("payment_intents.create", _to_payment_intent, intent)

    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        with _translate_errors("payment_intents.retrieve"):
            intent = await stripe.PaymentIntent.retrieve_async(payment_intent_id, **self._options)
        return _decode("payment_intents.retrieve", _to_payment_intent, intent)

    async def create_transfer(self, spec: TransferSpec) -> Transfer:
        params: dict[str, Any] = {
            "amount": spec.amount,
            "currency": spec.currency,
            "destination": spec.destination,
        }
        if spec.description:
            params["description"] = spec.description

        with _translate_errors("transfers.create"):
            transfer = await stripe.Transfer.create_async(**params, **self._options)

        result = _decode("transfers.create", _to_transfer, transfer)
        if result.destination is None:
            result.destination = spec.destination
        return result

    async def retrieve_balance(self) -> BalanceSnapshot:
        with _translate_errors("balance.retrieve"):
            balance = await stripe.Balance.retrieve_async(**self._options)
        return _decode("balance.retrieve", _to_balance, balance)
