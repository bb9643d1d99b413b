"""Enumerations for the connect platform domain model."""

from enum import Enum


class ErrorKind(str, Enum):
    """Stable business error codes returned by the API."""

    # Onboarding / capabilities
    ONBOARDING_REQUIRED = "ONBOARDING_REQUIRED"
    CAPABILITY_NOT_SUPPORTED = "CAPABILITY_NOT_SUPPORTED"

    # Payments
    PAYMENT_AUTHENTICATION_FAILED = "PAYMENT_AUTHENTICATION_FAILED"
    PAYMENT_DECLINED = "PAYMENT_DECLINED"

    # Transfers / balance
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    CURRENCY_MISMATCH = "CURRENCY_MISMATCH"
    AMOUNT_TOO_SMALL = "AMOUNT_TOO_SMALL"

    # Generic validations / conflicts
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"

    # Processor and infrastructure
    PROCESSOR_API_ERROR = "PROCESSOR_API_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CapabilityStatus(str, Enum):
    """Processor-side states of an account capability."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    UNREQUESTED = "unrequested"


class PaymentMode(str, Enum):
    """How a payment intent's funds are routed."""

    SPLIT = "split"  # Funds routed to a connected account, minus optional fee
    PLATFORM = "platform"  # Funds stay on the platform
