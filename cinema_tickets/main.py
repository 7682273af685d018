import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from cinema_tickets.api.routes.routes import purchase_validation_error_handler, router
from cinema_tickets.application.purchase_orchestrator import PurchaseOrchestrator
from cinema_tickets.config import Settings, get_settings
from cinema_tickets.infrastructure.gateways.in_memory import (
    InMemoryPaymentGateway,
    InMemorySeatReservationService,
)

logger = logging.getLogger(__name__)


def build_orchestrator(settings: Settings) -> PurchaseOrchestrator:
    return PurchaseOrchestrator(
        payment_gateway=InMemoryPaymentGateway(
            account_limit=settings.payment_account_limit,
        ),
        seat_reservation_service=InMemorySeatReservationService(
            capacity=settings.seat_capacity,
        ),
    )


def create_app(
    settings: Optional[Settings] = None,
    orchestrator: Optional[PurchaseOrchestrator] = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Cinema Ticket Service")
    app.state.orchestrator = orchestrator or build_orchestrator(settings)
    app.add_exception_handler(RequestValidationError, purchase_validation_error_handler)
    app.include_router(router)

    logger.info(
        "Ticket service ready. seat_capacity=%s payment_account_limit=%s",
        settings.seat_capacity,
        settings.payment_account_limit,
    )
    return app


app = create_app()
