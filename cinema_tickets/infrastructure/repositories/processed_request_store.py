# cinema_tickets/infrastructure/repositories/processed_request_store.py

from abc import ABC, abstractmethod
from typing import Set

from cinema_tickets.domain.idempotency import IdempotencyKey


class ProcessedRequestStore(ABC):
    """
    Membership set of requests that have been fulfilled.

    Callers must serialise contains/insert themselves; the orchestrator
    does so under its purchase lock.
    """

    @abstractmethod
    def contains(self, key: IdempotencyKey) -> bool:
        """Return True if the request has already been fulfilled."""
        ...

    @abstractmethod
    def insert(self, key: IdempotencyKey) -> None:
        """Record the request as fulfilled. Keys are never removed."""
        ...


class InMemoryProcessedRequestStore(ProcessedRequestStore):
    """Process-lifetime store. Contents are lost on restart."""

    def __init__(self) -> None:
        self._keys: Set[IdempotencyKey] = set()

    def contains(self, key: IdempotencyKey) -> bool:
        return key in self._keys

    def insert(self, key: IdempotencyKey) -> None:
        self._keys.add(key)

    def __len__(self) -> int:
        return len(self._keys)
