import logging
import threading
from typing import Iterable, Optional, Tuple

from cinema_tickets.application.ports import PaymentGateway, SeatReservationService
from cinema_tickets.domain.exceptions import (
    DuplicateRequestError,
    EmptyRequestError,
    InfantRatioExceededError,
    InvalidAccountError,
    InvalidLineItemError,
    MissingAdultError,
    PaymentFailedError,
    PurchaseValidationError,
    RefundFailedError,
    ReservationFailedError,
    TicketPurchaseError,
    TooManyTicketsError,
)
from cinema_tickets.domain.idempotency import IdempotencyKey
from cinema_tickets.domain.results import PurchaseFailure, PurchaseResult, PurchaseSuccess
from cinema_tickets.domain.tickets import (
    MAX_TICKETS_PER_PURCHASE,
    PurchaseOutcome,
    TicketLineItem,
    TicketTotals,
)
from cinema_tickets.infrastructure.repositories.processed_request_store import (
    InMemoryProcessedRequestStore,
    ProcessedRequestStore,
)


logger = logging.getLogger(__name__)


def _failure_reason(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


class PurchaseOrchestrator:
    """
    Validates a ticket purchase, charges the account and reserves seats.

    The whole sequence runs under one lock, so the duplicate check and
    the final insert into the processed-request store are atomic. The
    lock is held across the blocking gateway calls: a slow gateway
    delays every other purchase in the process.
    """

    def __init__(
        self,
        payment_gateway: PaymentGateway,
        seat_reservation_service: SeatReservationService,
        processed_requests: Optional[ProcessedRequestStore] = None,
    ):
        if payment_gateway is None:
            raise ValueError("payment_gateway cannot be None.")
        if seat_reservation_service is None:
            raise ValueError("seat_reservation_service cannot be None.")

        self.payment_gateway = payment_gateway
        self.seat_reservation_service = seat_reservation_service
        self.processed_requests = (
            processed_requests
            if processed_requests is not None
            else InMemoryProcessedRequestStore()
        )
        self._lock = threading.Lock()

    def purchase(
        self,
        account_id: Optional[int],
        items: Optional[Iterable[TicketLineItem]],
    ) -> PurchaseResult:
        with self._lock:
            try:
                outcome = self._purchase(account_id, items)
            except TicketPurchaseError as exc:
                return PurchaseFailure.from_error(exc)
        return PurchaseSuccess(outcome)

    def _purchase(
        self,
        account_id: Optional[int],
        items: Optional[Iterable[TicketLineItem]],
    ) -> PurchaseOutcome:
        try:
            line_items, totals = self._validate(account_id, items)
        except (PurchaseValidationError, InvalidLineItemError) as exc:
            logger.info("Rejected purchase for account_id=%s: %s", account_id, exc)
            raise

        amount = totals.amount
        seats = totals.seats

        key = IdempotencyKey.from_request(account_id, line_items)
        if self.processed_requests.contains(key):
            logger.warning(
                "Duplicate purchase request rejected. key=%s fingerprint=%s",
                key,
                key.fingerprint,
            )
            raise DuplicateRequestError(
                f"Request has already been processed for account {account_id}."
            )

        self._charge(account_id, amount)
        self._reserve(account_id, seats, amount)

        self.processed_requests.insert(key)
        logger.info(
            "Purchase committed. account_id=%s amount=%s seats=%s",
            account_id,
            amount,
            seats,
        )
        return PurchaseOutcome(amount_charged=amount, seats_reserved=seats)

    def _validate(
        self,
        account_id: Optional[int],
        items: Optional[Iterable[TicketLineItem]],
    ) -> Tuple[Tuple[TicketLineItem, ...], TicketTotals]:
        if not self.is_valid_account(account_id):
            raise InvalidAccountError(f"Invalid account ID: {account_id}")

        line_items = tuple(items) if items is not None else ()
        if not line_items:
            raise EmptyRequestError("No tickets requested.")

        for item in line_items:
            if not isinstance(item, TicketLineItem):
                raise InvalidLineItemError(
                    f"Expected TicketLineItem, got {type(item).__name__}"
                )

        totals = TicketTotals.from_items(line_items)

        if totals.total > MAX_TICKETS_PER_PURCHASE:
            raise TooManyTicketsError(
                f"Cannot purchase more than {MAX_TICKETS_PER_PURCHASE} tickets at a time."
            )

        if totals.children + totals.infants > 0 and totals.adults == 0:
            raise MissingAdultError(
                "Must purchase at least one adult ticket when buying child or infant tickets."
            )

        if totals.infants > totals.adults:
            raise InfantRatioExceededError(
                "Number of infant tickets cannot exceed number of adult tickets."
            )

        return line_items, totals

    @staticmethod
    def is_valid_account(account_id: Optional[int]) -> bool:
        return (
            isinstance(account_id, int)
            and not isinstance(account_id, bool)
            and account_id > 0
        )

    def _charge(self, account_id: int, amount: int) -> None:
        try:
            self.payment_gateway.charge(account_id, amount)
        except Exception as exc:
            reason = _failure_reason(exc)
            logger.warning(
                "Payment failed. account_id=%s amount=%s reason=%s",
                account_id,
                amount,
                reason,
            )
            raise PaymentFailedError(f"Payment failed: {reason}") from exc

    def _reserve(self, account_id: int, seats: int, amount: int) -> None:
        try:
            self.seat_reservation_service.reserve(account_id, seats)
        except Exception as exc:
            reservation_reason = _failure_reason(exc)
            self._refund(account_id, amount, reservation_reason)
            logger.warning(
                "Seat reservation failed, charge refunded. account_id=%s amount=%s reason=%s",
                account_id,
                amount,
                reservation_reason,
            )
            raise ReservationFailedError(
                f"Seat reservation failed: {reservation_reason}",
                reservation_reason=reservation_reason,
            ) from exc

    def _refund(self, account_id: int, amount: int, reservation_reason: str) -> None:
        try:
            self.payment_gateway.charge(account_id, -amount)
        except Exception as exc:
            refund_reason = _failure_reason(exc)
            logger.error(
                "Refund failed, manual reconciliation required. "
                "account_id=%s amount=%s reservation_reason=%s refund_reason=%s",
                account_id,
                amount,
                reservation_reason,
                refund_reason,
            )
            raise RefundFailedError(
                f"Seat reservation failed: {reservation_reason}. "
                f"Refund failed for account {account_id}: {refund_reason}. "
                "Contact the help centre for a manual refund.",
                reservation_reason=reservation_reason,
                refund_reason=refund_reason,
            ) from exc

