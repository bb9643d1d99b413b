"""
Audit trail for account and money-moving operations.

Every registry change, payment intent and transfer gets one structured
log line:

  AUDIT | action=<what happened> account=<account id> | <json details>

The registry is volatile, so these lines are the only record of what the
process did. They go through standard logging and are never written
anywhere else by this service.
"""

import json
import logging
from typing import Any, Optional

logger = logging.getLogger("connect_platform.audit")


def log_event(
    action: str,
    account_id: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> None:
    """
    Emit an audit log entry.

    Args:
        action: What happened (e.g. "account_created", "transfer_created").
        account_id: The connected account this event relates to.
        details: Arbitrary context (serialized to JSON).
    """
    logger.info(
        "AUDIT | action=%s account=%s | %s",
        action,
        account_id or "-",
        json.dumps(details, default=str)[:500] if details else "",
    )


def log_rejection(action: str, error: Exception, account_id: Optional[str] = None) -> None:
    """Record a refused operation along with its classified kind."""
    kind = getattr(error, "kind", None)
    log_event(
        action,
        account_id=account_id,
        details={
            "kind": kind.value if kind is not None else type(error).__name__,
            "error": str(error),
        },
    )
