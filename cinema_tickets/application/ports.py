# cinema_tickets/application/ports.py

from abc import ABC, abstractmethod


class PaymentGateway(ABC):
    """Remote payment provider. Not assumed to be idempotent."""

    @abstractmethod
    def charge(self, account_id: int, amount: int) -> None:
        """
        Charge `amount` to the account. A negative amount refunds
        that magnitude. Any raised exception counts as a failure.
        """
        ...


class SeatReservationService(ABC):
    """Remote seat booking provider. Not assumed to be idempotent."""

    @abstractmethod
    def reserve(self, account_id: int, seat_count: int) -> None:
        """Reserve seats for the account. Any raised exception counts as a failure."""
        ...
