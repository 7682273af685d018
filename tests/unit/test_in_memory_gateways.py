# tests/unit/test_in_memory_gateways.py

import pytest

from cinema_tickets.application.purchase_orchestrator import PurchaseOrchestrator
from cinema_tickets.domain.exceptions import GatewayError, PurchaseErrorKind
from cinema_tickets.domain.tickets import TicketLineItem, TicketType
from cinema_tickets.infrastructure.gateways.in_memory import (
    InMemoryPaymentGateway,
    InMemorySeatReservationService,
)


def test_payment_ledger_nets_refunds():
    gateway = InMemoryPaymentGateway()

    gateway.charge(1, 65)
    gateway.charge(1, -65)
    gateway.charge(2, 25)

    assert gateway.net_charged(1) == 0
    assert gateway.net_charged(2) == 25
    assert [entry.is_refund for entry in gateway.ledger] == [False, True, False]


def test_payment_account_limit():
    gateway = InMemoryPaymentGateway(account_limit=50)

    gateway.charge(1, 50)
    with pytest.raises(GatewayError):
        gateway.charge(1, 1)
    gateway.charge(1, -50)

    assert gateway.net_charged(1) == 0


def test_seat_reservation_decrements_capacity():
    seats = InMemorySeatReservationService(capacity=10)

    seats.reserve(1, 4)
    seats.reserve(1, 2)

    assert seats.available_seats == 4
    assert seats.reserved_for(1) == 6
    assert seats.reserved_for(2) == 0


def test_seat_reservation_rejects_overbooking():
    seats = InMemorySeatReservationService(capacity=2)

    with pytest.raises(GatewayError, match="Insufficient seats"):
        seats.reserve(1, 3)
    assert seats.available_seats == 2


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        InMemorySeatReservationService(capacity=-1)


def test_sold_out_purchase_is_refunded():
    payments = InMemoryPaymentGateway()
    seats = InMemorySeatReservationService(capacity=1)
    orchestrator = PurchaseOrchestrator(payments, seats)

    result = orchestrator.purchase(1001, [TicketLineItem(TicketType.ADULT, 2)])

    assert result.kind is PurchaseErrorKind.RESERVATION_FAILED
    assert payments.net_charged(1001) == 0
    assert [entry.amount for entry in payments.ledger] == [50, -50]
    assert seats.available_seats == 1
