"""
Failures surfaced by processor gateways.

Gateways translate SDK exceptions into this small hierarchy so the engine
can classify them without importing the processor SDK. This layer never
retries: rate limits are classified and handed back to the caller.
"""

from typing import Optional


class GatewayError(Exception):
    """Base exception for processor gateway failures."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        request_id: Optional[str] = None,
        http_status: Optional[int] = None,
    ):
        super().__init__(message)
        self.code = code  # Processor error code, e.g. "balance_insufficient"
        self.request_id = request_id
        self.http_status = http_status


class GatewayRateLimitError(GatewayError):
    """429 Too Many Requests from the processor."""


class CardError(GatewayError):
    """The processor refused a card (declined or authentication required)."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        decline_code: Optional[str] = None,
        request_id: Optional[str] = None,
        http_status: Optional[int] = 402,
    ):
        super().__init__(message, code=code, request_id=request_id, http_status=http_status)
        self.decline_code = decline_code


class ResourceMissingError(GatewayError):
    """The requested object does not exist (or is not visible to this key)."""

    def __init__(self, message: str, request_id: Optional[str] = None):
        super().__init__(message, code="resource_missing", request_id=request_id, http_status=404)
