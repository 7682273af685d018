from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from cinema_tickets.application.ports import PaymentGateway, SeatReservationService
from cinema_tickets.application.purchase_orchestrator import PurchaseOrchestrator
from cinema_tickets.domain.exceptions import GatewayError
from cinema_tickets.main import create_app


FAMILY = [
    {"type": "ADULT", "count": 2},
    {"type": "CHILD", "count": 1},
    {"type": "INFANT", "count": 1},
]


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200


def test_purchase_flow(client, orchestrator):
    response = client.post("/purchases", json={"account_id": 1001, "tickets": FAMILY})

    assert response.status_code == 200
    assert response.json() == {"amount_charged": 65, "seats_reserved": 3}
    assert orchestrator.seat_reservation_service.available_seats == 7
    assert orchestrator.payment_gateway.net_charged(1001) == 65

    retry = client.post(
        "/purchases",
        json={"account_id": 1001, "tickets": list(reversed(FAMILY))},
    )

    assert retry.status_code == 409
    assert retry.json()["detail"]["kind"] == "DUPLICATE_REQUEST"
    assert orchestrator.payment_gateway.net_charged(1001) == 65


def test_lowercase_ticket_types_accepted(client):
    response = client.post(
        "/purchases",
        json={"account_id": 1002, "tickets": [{"type": "adult", "count": 1}]},
    )

    assert response.status_code == 200
    assert response.json() == {"amount_charged": 25, "seats_reserved": 1}


def test_missing_adult(client):
    response = client.post(
        "/purchases",
        json={"account_id": 1007, "tickets": [{"type": "CHILD", "count": 1}]},
    )

    assert response.status_code == 422
    assert response.json()["detail"] == {
        "kind": "MISSING_ADULT",
        "message": "Must purchase at least one adult ticket when buying child or infant tickets.",
        "requires_manual_intervention": False,
    }


def test_missing_account(client):
    response = client.post("/purchases", json={"tickets": FAMILY})

    assert response.status_code == 422
    assert response.json()["detail"]["kind"] == "INVALID_ACCOUNT"


def test_empty_request(client):
    response = client.post("/purchases", json={"account_id": 1001, "tickets": []})

    assert response.status_code == 422
    assert response.json()["detail"]["kind"] == "EMPTY_REQUEST"


def test_negative_count(client):
    response = client.post(
        "/purchases",
        json={"account_id": 1001, "tickets": [{"type": "ADULT", "count": -1}]},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["kind"] == "INVALID_ARGUMENT"


def test_unknown_ticket_type(client):
    response = client.post(
        "/purchases",
        json={"account_id": 1001, "tickets": [{"type": "SENIOR", "count": 1}]},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["kind"] == "INVALID_ARGUMENT"


def test_sold_out_is_refunded(client, orchestrator):
    # Capacity is 10 seats.
    response = client.post(
        "/purchases",
        json={"account_id": 1003, "tickets": [{"type": "ADULT", "count": 11}]},
    )

    assert response.status_code == 409
    assert response.json()["detail"]["kind"] == "RESERVATION_FAILED"
    assert orchestrator.payment_gateway.net_charged(1003) == 0
    assert orchestrator.seat_reservation_service.available_seats == 10


def test_payment_failure_status():
    payment = Mock(spec=PaymentGateway)
    payment.charge.side_effect = GatewayError("Card declined")
    reservation = Mock(spec=SeatReservationService)
    client = TestClient(create_app(orchestrator=PurchaseOrchestrator(payment, reservation)))

    response = client.post("/purchases", json={"account_id": 1001, "tickets": FAMILY})

    assert response.status_code == 402
    assert response.json()["detail"]["message"] == "Payment failed: Card declined"
    reservation.reserve.assert_not_called()


def test_refund_failure_flags_manual_intervention():
    payment = Mock(spec=PaymentGateway)
    payment.charge.side_effect = [None, GatewayError("Refund rejected")]
    reservation = Mock(spec=SeatReservationService)
    reservation.reserve.side_effect = GatewayError("No seats available")
    client = TestClient(create_app(orchestrator=PurchaseOrchestrator(payment, reservation)))

    response = client.post("/purchases", json={"account_id": 1004, "tickets": FAMILY})

    assert response.status_code == 500
    detail = response.json()["detail"]
    assert detail["kind"] == "REFUND_FAILED"
    assert detail["requires_manual_intervention"] is True


def test_refunded_request_can_be_resent():
    payment = Mock(spec=PaymentGateway)
    reservation = Mock(spec=SeatReservationService)
    reservation.reserve.side_effect = [GatewayError("No seats available"), None]
    client = TestClient(create_app(orchestrator=PurchaseOrchestrator(payment, reservation)))
    body = {"account_id": 1005, "tickets": FAMILY}

    first = client.post("/purchases", json=body)
    second = client.post("/purchases", json=body)

    assert first.status_code == 409
    assert first.json()["detail"]["kind"] == "RESERVATION_FAILED"
    assert second.status_code == 200
    assert second.json() == {"amount_charged": 65, "seats_reserved": 3}


# ---------------------
# MALFORMED BODIES
# ---------------------

@pytest.mark.parametrize("account_id", [True, "1001", "abc", 12.5])
def test_non_integer_account_rejected(client, orchestrator, account_id):
    response = client.post(
        "/purchases",
        json={"account_id": account_id, "tickets": [{"type": "ADULT", "count": 1}]},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["kind"] == "INVALID_ACCOUNT"
    assert response.json()["detail"]["requires_manual_intervention"] is False
    assert orchestrator.payment_gateway.ledger == []


@pytest.mark.parametrize("count", [True, "1"])
def test_non_integer_count_rejected(client, orchestrator, count):
    response = client.post(
        "/purchases",
        json={"account_id": 1001, "tickets": [{"type": "ADULT", "count": count}]},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["kind"] == "INVALID_ARGUMENT"
    assert orchestrator.payment_gateway.ledger == []


def test_bad_account_reported_before_bad_ticket_type(client):
    response = client.post(
        "/purchases",
        json={"account_id": -5, "tickets": [{"type": "SENIOR", "count": 1}]},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["kind"] == "INVALID_ACCOUNT"


def test_bad_account_reported_before_bad_count(client):
    response = client.post(
        "/purchases",
        json={"account_id": "abc", "tickets": [{"type": "ADULT", "count": True}]},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["kind"] == "INVALID_ACCOUNT"
