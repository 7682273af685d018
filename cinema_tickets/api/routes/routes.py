import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cinema_tickets.api.schemas.schemas import (
    PurchaseErrorDetail,
    PurchaseRequest,
    PurchaseResponse,
)
from cinema_tickets.application.purchase_orchestrator import PurchaseOrchestrator
from cinema_tickets.domain.exceptions import (
    InvalidAccountError,
    InvalidLineItemError,
    PurchaseErrorKind,
)
from cinema_tickets.domain.results import PurchaseFailure
from cinema_tickets.domain.tickets import TicketLineItem


router = APIRouter()
logger = logging.getLogger(__name__)

# Literal code: Starlette renamed the 422 constant between releases.
UNPROCESSABLE_STATUS = 422

_STATUS_BY_KIND = {
    PurchaseErrorKind.DUPLICATE_REQUEST: status.HTTP_409_CONFLICT,
    PurchaseErrorKind.PAYMENT_FAILED: status.HTTP_402_PAYMENT_REQUIRED,
    PurchaseErrorKind.RESERVATION_FAILED: status.HTTP_409_CONFLICT,
    PurchaseErrorKind.REFUND_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_orchestrator(request: Request) -> PurchaseOrchestrator:
    return request.app.state.orchestrator


def _status_for(failure: PurchaseFailure) -> int:
    if failure.is_validation_error:
        return UNPROCESSABLE_STATUS
    return _STATUS_BY_KIND[failure.kind]


def _error_detail(failure: PurchaseFailure) -> dict:
    return PurchaseErrorDetail(
        kind=failure.kind.value,
        message=failure.detail,
        requires_manual_intervention=failure.requires_manual_intervention,
    ).model_dump()


def _error_response(failure: PurchaseFailure) -> HTTPException:
    return HTTPException(
        status_code=_status_for(failure),
        detail=_error_detail(failure),
    )


def _invalid_account(account_id) -> PurchaseFailure:
    return PurchaseFailure.from_error(InvalidAccountError(f"Invalid account ID: {account_id}"))


def purchase_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Report malformed request bodies in the same shape as business-rule
    failures. A bad account id is reported ahead of bad line items.
    """
    errors = exc.errors()
    account_errors = [error for error in errors if tuple(error["loc"][1:2]) == ("account_id",)]
    if account_errors:
        failure = _invalid_account(account_errors[0].get("input"))
    else:
        first = errors[0] if errors else {"loc": (), "msg": "Invalid request"}
        location = ".".join(str(part) for part in first["loc"][1:]) or "body"
        failure = PurchaseFailure.from_error(
            InvalidLineItemError(f"Invalid value for {location}: {first['msg']}")
        )

    logger.info("Rejected malformed request to %s: %s", request.url.path, failure.detail)
    return JSONResponse(
        status_code=UNPROCESSABLE_STATUS,
        content={"detail": _error_detail(failure)},
    )


@router.get("/health")
def health():
    return {"message": "Cinema ticket service is running"}


@router.post("/purchases", response_model=PurchaseResponse)
def purchase_tickets(
    request: PurchaseRequest,
    orchestrator: PurchaseOrchestrator = Depends(get_orchestrator),
):
    # Account is checked before line items are parsed.
    if not PurchaseOrchestrator.is_valid_account(request.account_id):
        raise _error_response(_invalid_account(request.account_id))

    try:
        items = [TicketLineItem.of(item.type, item.count) for item in request.tickets]
    except InvalidLineItemError as exc:
        raise _error_response(PurchaseFailure.from_error(exc)) from exc

    result = orchestrator.purchase(request.account_id, items)
    if isinstance(result, PurchaseFailure):
        if result.requires_manual_intervention:
            logger.error(
                "Purchase for account_id=%s needs manual reconciliation: %s",
                request.account_id,
                result.detail,
            )
        raise _error_response(result)

    return PurchaseResponse(
        amount_charged=result.outcome.amount_charged,
        seats_reserved=result.outcome.seats_reserved,
    )
