"""
Process-lifetime registry of known connected accounts.

Holds the ids of every connected account this process created or verified,
plus one designated treasury account. Status is never cached here: the
state view fetches it live from the processor. Contents are lost on
restart.
"""

import threading
from abc import ABC, abstractmethod
from typing import Optional


class AccountRegistry(ABC):
    """Store of known account ids and the treasury slot."""

    @abstractmethod
    def add(self, account_id: str) -> None:
        ...

    @abstractmethod
    def account_ids(self) -> list[str]:
        """Registered ids in registration order."""
        ...

    @abstractmethod
    def __contains__(self, account_id: object) -> bool:
        ...

    @abstractmethod
    def get_treasury(self) -> Optional[str]:
        ...

    @abstractmethod
    def set_treasury(self, account_id: str) -> None:
        """Designate the treasury account. Last write wins."""
        ...


class InMemoryAccountRegistry(AccountRegistry):
    """Thread-safe in-memory registry guarded by a single lock."""

    def __init__(self, account_ids: Optional[list[str]] = None, treasury_id: Optional[str] = None):
        self._lock = threading.Lock()
        self._accounts: dict[str, bool] = {account_id: True for account_id in account_ids or []}
        self._treasury_id = treasury_id

    def add(self, account_id: str) -> None:
        with self._lock:
            self._accounts[account_id] = True

    def account_ids(self) -> list[str]:
        with self._lock:
            return list(self._accounts)

    def __contains__(self, account_id: object) -> bool:
        with self._lock:
            return account_id in self._accounts

    def get_treasury(self) -> Optional[str]:
        with self._lock:
            if self._treasury_id and self._treasury_id.strip():
                return self._treasury_id
            return None

    def set_treasury(self, account_id: str) -> None:
        with self._lock:
            self._treasury_id = account_id
