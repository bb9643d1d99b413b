"""
Request shape checks run before any processor call.

Each check raises ``BusinessError(BAD_REQUEST)`` with a message naming the
offending field. Callers run them in a fixed order (amount, currency,
destination, fee) so the first failure reported is always the same for a
given request.
"""

from typing import Optional

from connect_platform.engine.errors import BusinessError
from connect_platform.models.enums import ErrorKind

ACCOUNT_ID_PREFIX = "acct_"


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def require_positive_amount(amount: Optional[int]) -> int:
    if amount is None or amount <= 0:
        raise BusinessError(ErrorKind.BAD_REQUEST, "Missing or invalid amount")
    return amount


def require_currency(currency: Optional[str]) -> str:
    if is_blank(currency):
        raise BusinessError(ErrorKind.BAD_REQUEST, "Missing currency")
    return currency.strip()


def require_destination(destination_account_id: Optional[str]) -> str:
    if is_blank(destination_account_id):
        raise BusinessError(ErrorKind.BAD_REQUEST, "Missing destination_account_id")
    return destination_account_id.strip()


def check_application_fee(fee: Optional[int]) -> Optional[int]:
    """Fees are optional but never negative."""
    if fee is not None and fee < 0:
        raise BusinessError(ErrorKind.BAD_REQUEST, "Invalid application_fee_amount")
    return fee


def require_account_id(account_id: Optional[str], require_prefix: bool = False) -> str:
    """Check that a caller-supplied id looks like a processor account id."""
    if is_blank(account_id):
        raise BusinessError(ErrorKind.BAD_REQUEST, "Missing id")
    account_id = account_id.strip()
    if require_prefix and not account_id.startswith(ACCOUNT_ID_PREFIX):
        raise BusinessError(ErrorKind.BAD_REQUEST, "Invalid account id")
    return account_id


def optional_text(value: Optional[str]) -> Optional[str]:
    """Blank strings are treated as absent."""
    if is_blank(value):
        return None
    return value.strip()
