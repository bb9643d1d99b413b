from connect_platform.models.enums import CapabilityStatus, ErrorKind, PaymentMode
from connect_platform.models.processor import (
    Account,
    AccountLink,
    BalanceAmount,
    BalanceSnapshot,
    PaymentIntent,
    PaymentIntentRequest,
    Transfer,
    TransferRequest,
)

__all__ = [
    "Account",
    "AccountLink",
    "BalanceAmount",
    "BalanceSnapshot",
    "PaymentIntent",
    "PaymentIntentRequest",
    "Transfer",
    "TransferRequest",
    "CapabilityStatus",
    "ErrorKind",
    "PaymentMode",
]
