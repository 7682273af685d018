import logging

from cinema_tickets.application.purchase_orchestrator import PurchaseOrchestrator
from cinema_tickets.config import get_settings
from cinema_tickets.domain.tickets import TicketLineItem, TicketType
from cinema_tickets.infrastructure.gateways.in_memory import (
    InMemoryPaymentGateway,
    InMemorySeatReservationService,
)


logger = logging.getLogger("demo_purchases")


def _scenarios() -> list[dict]:
    return [
        {
            "label": "Family of four",
            "account_id": 1001,
            "items": [
                TicketLineItem(TicketType.ADULT, 2),
                TicketLineItem(TicketType.CHILD, 1),
                TicketLineItem(TicketType.INFANT, 1),
            ],
        },
        {
            "label": "Same family, items reordered",
            "account_id": 1001,
            "items": [
                TicketLineItem(TicketType.INFANT, 1),
                TicketLineItem(TicketType.CHILD, 1),
                TicketLineItem(TicketType.ADULT, 2),
            ],
        },
        {
            "label": "Child on their own",
            "account_id": 1007,
            "items": [TicketLineItem(TicketType.CHILD, 1)],
        },
        {
            "label": "Too many infants",
            "account_id": 1008,
            "items": [
                TicketLineItem(TicketType.ADULT, 2),
                TicketLineItem(TicketType.INFANT, 3),
            ],
        },
        {
            "label": "Full block of 25",
            "account_id": 1009,
            "items": [TicketLineItem(TicketType.ADULT, 25)],
        },
    ]


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    payments = InMemoryPaymentGateway(account_limit=settings.payment_account_limit)
    seats = InMemorySeatReservationService(capacity=settings.seat_capacity)
    orchestrator = PurchaseOrchestrator(payments, seats)

    for scenario in _scenarios():
        result = orchestrator.purchase(scenario["account_id"], scenario["items"])
        if result.ok:
            logger.info(
                "%s: charged %s for %s seats",
                scenario["label"],
                result.outcome.amount_charged,
                result.outcome.seats_reserved,
            )
        else:
            logger.info("%s: %s (%s)", scenario["label"], result.kind.value, result.detail)

    logger.info("Seats still available: %s/%s", seats.available_seats, seats.capacity)


if __name__ == "__main__":
    main()
