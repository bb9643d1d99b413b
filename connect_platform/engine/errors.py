"""
Business errors raised by the orchestration layer.

Workflow code raises ``BusinessError`` with an ``ErrorKind`` and never picks
an HTTP status: the API layer translates kinds to statuses in one place.

Gateway failures are caught where the call is made and re-classified here,
so raw processor exceptions never leave the engine.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from connect_platform.models.enums import ErrorKind
from connect_platform.providers.errors import CardError, GatewayError, GatewayRateLimitError

# Processor error codes that carry a more specific business meaning.
PROCESSOR_CODE_KINDS: dict[str, ErrorKind] = {
    "authentication_required": ErrorKind.PAYMENT_AUTHENTICATION_FAILED,
    "card_declined": ErrorKind.PAYMENT_DECLINED,
    "amount_too_small": ErrorKind.AMOUNT_TOO_SMALL,
    "balance_insufficient": ErrorKind.INSUFFICIENT_FUNDS,
    "insufficient_capabilities_for_transfer": ErrorKind.CAPABILITY_NOT_SUPPORTED,
}


class BusinessError(Exception):
    """A classified failure with a stable kind and optional structured details."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details or None

    def __repr__(self) -> str:
        return f"BusinessError(kind={self.kind.value!r}, message={self.message!r})"


def processor_details(error: GatewayError) -> Optional[dict[str, Any]]:
    details: dict[str, Any] = {}
    if error.code:
        details["processor_code"] = error.code
    if isinstance(error, CardError) and error.decline_code:
        details["decline_code"] = error.decline_code
    if error.request_id:
        details["request_id"] = error.request_id
    return details or None


def classify_gateway_error(
    error: GatewayError,
    message: str,
    fallback: ErrorKind = ErrorKind.PROCESSOR_API_ERROR,
    use_processor_codes: bool = True,
) -> BusinessError:
    """Map a gateway failure onto the business taxonomy.

    Rate limits always become ``RATE_LIMITED``. Card failures and the codes
    in ``PROCESSOR_CODE_KINDS`` get their specific kind unless
    ``use_processor_codes`` is off. Everything else becomes ``fallback``.
    """
    text = f"{message}: {error}"
    details = processor_details(error)

    if isinstance(error, GatewayRateLimitError):
        return BusinessError(ErrorKind.RATE_LIMITED, text, details)

    if use_processor_codes:
        if error.code in PROCESSOR_CODE_KINDS:
            return BusinessError(PROCESSOR_CODE_KINDS[error.code], text, details)
        if isinstance(error, CardError):
            return BusinessError(ErrorKind.PAYMENT_DECLINED, text, details)

    return BusinessError(fallback, text, details)


@contextmanager
def gateway_call(
    message: str,
    fallback: ErrorKind = ErrorKind.PROCESSOR_API_ERROR,
    use_processor_codes: bool = True,
) -> Iterator[None]:
    """Re-classify any ``GatewayError`` raised inside the block."""
    try:
        yield
    except GatewayError as e:
        raise classify_gateway_error(e, message, fallback, use_processor_codes) from e
