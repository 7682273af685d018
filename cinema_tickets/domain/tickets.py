# cinema_tickets/domain/tickets.py

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable

from cinema_tickets.domain.exceptions import InvalidLineItemError


class TicketType(str, Enum):
    ADULT = "ADULT"
    CHILD = "CHILD"
    INFANT = "INFANT"

    @classmethod
    def parse(cls, value: "TicketType | str") -> "TicketType":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidLineItemError(f"Unknown ticket type: {value!r}")


# Declaration order of TicketType, used to canonicalise line items.
TICKET_TYPE_ORDER: Dict[TicketType, int] = {
    ticket_type: index for index, ticket_type in enumerate(TicketType)
}

TICKET_PRICES: Dict[TicketType, int] = {
    TicketType.INFANT: 0,
    TicketType.CHILD: 15,
    TicketType.ADULT: 25,
}

SEAT_BEARING_TYPES = frozenset({TicketType.ADULT, TicketType.CHILD})

MAX_TICKETS_PER_PURCHASE = 25


@dataclass(frozen=True)
class TicketLineItem:
    """
    Immutable (ticket type, count) pair within one purchase request.
    """

    type: TicketType
    count: int

    def __post_init__(self) -> None:
        if not isinstance(self.type, TicketType):
            raise InvalidLineItemError(
                f"Ticket type must be a TicketType, got {type(self.type).__name__}"
            )
        # bool is an int subclass; reject it explicitly
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise InvalidLineItemError(
                f"Ticket count must be an integer, got {self.count!r}"
            )
        if self.count < 0:
            raise InvalidLineItemError("Ticket count cannot be negative.")

    @classmethod
    def of(cls, ticket_type: "TicketType | str", count: int) -> "TicketLineItem":
        return cls(type=TicketType.parse(ticket_type), count=count)

    def __str__(self) -> str:
        return f"{self.type.value}x{self.count}"


@dataclass(frozen=True)
class TicketTotals:
    """Per-type ticket counts summed across all line items of a request."""

    adults: int = 0
    children: int = 0
    infants: int = 0

    @classmethod
    def from_items(cls, items: Iterable[TicketLineItem]) -> "TicketTotals":
        counts = {ticket_type: 0 for ticket_type in TicketType}
        for item in items:
            counts[item.type] += item.count
        return cls(
            adults=counts[TicketType.ADULT],
            children=counts[TicketType.CHILD],
            infants=counts[TicketType.INFANT],
        )

    def count(self, ticket_type: TicketType) -> int:
        return {
            TicketType.ADULT: self.adults,
            TicketType.CHILD: self.children,
            TicketType.INFANT: self.infants,
        }[ticket_type]

    @property
    def total(self) -> int:
        return self.adults + self.children + self.infants

    @property
    def amount(self) -> int:
        return sum(
            TICKET_PRICES[ticket_type] * self.count(ticket_type)
            for ticket_type in TicketType
        )

    @property
    def seats(self) -> int:
        # Infants sit on an adult's lap.
        return sum(self.count(ticket_type) for ticket_type in SEAT_BEARING_TYPES)


@dataclass(frozen=True)
class PurchaseOutcome:
    amount_charged: int
    seats_reserved: int
