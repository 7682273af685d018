# cinema_tickets/infrastructure/gateways/in_memory.py

import threading
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

from cinema_tickets.application.ports import PaymentGateway, SeatReservationService
from cinema_tickets.domain.exceptions import GatewayError


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LedgerEntry:
    account_id: int
    amount: int
    recorded_at: datetime

    @property
    def is_refund(self) -> bool:
        return self.amount < 0


class InMemoryPaymentGateway(PaymentGateway):
    """
    In-process payment provider for local runs and demos.

    Every accepted charge is appended to the ledger; refunds are
    negative entries. With `account_limit` set, a charge that would
    push an account's net total above the limit is declined.
    """

    def __init__(self, account_limit: Optional[int] = None):
        self.account_limit = account_limit
        self._ledger: List[LedgerEntry] = []
        self._lock = threading.Lock()

    def charge(self, account_id: int, amount: int) -> None:
        with self._lock:
            if (
                self.account_limit is not None
                and amount > 0
                and self._net_charged(account_id) + amount > self.account_limit
            ):
                raise GatewayError(
                    f"Charge of {amount} declined: account limit {self.account_limit} exceeded"
                )
            self._ledger.append(
                LedgerEntry(account_id=account_id, amount=amount, recorded_at=_utc_now())
            )

    def net_charged(self, account_id: int) -> int:
        with self._lock:
            return self._net_charged(account_id)

    @property
    def ledger(self) -> List[LedgerEntry]:
        with self._lock:
            return list(self._ledger)

    def _net_charged(self, account_id: int) -> int:
        return sum(entry.amount for entry in self._ledger if entry.account_id == account_id)


class InMemorySeatReservationService(SeatReservationService):
    """In-process seat inventory with a fixed capacity."""

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError("Capacity cannot be negative")
        self.capacity = capacity
        self._available_seats = capacity
        self._reservations: Dict[int, int] = defaultdict(int)
        self._lock = threading.Lock()

    def reserve(self, account_id: int, seat_count: int) -> None:
        with self._lock:
            if seat_count < 0:
                raise GatewayError("Seat count cannot be negative")
            if seat_count > self._available_seats:
                raise GatewayError(
                    f"Insufficient seats available: requested {seat_count}, "
                    f"available {self._available_seats}"
                )
            self._available_seats -= seat_count
            self._reservations[account_id] += seat_count

    @property
    def available_seats(self) -> int:
        with self._lock:
            return self._available_seats

    def reserved_for(self, account_id: int) -> int:
        with self._lock:
            return self._reservations.get(account_id, 0)
