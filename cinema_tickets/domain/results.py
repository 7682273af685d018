# cinema_tickets/domain/results.py

from dataclasses import dataclass
from typing import Optional, Union

from cinema_tickets.domain.exceptions import (
    ERRORS_BY_KIND,
    VALIDATION_KINDS,
    PurchaseErrorKind,
    RefundFailedError,
    ReservationFailedError,
    TicketPurchaseError,
)
from cinema_tickets.domain.tickets import PurchaseOutcome


@dataclass(frozen=True)
class PurchaseSuccess:
    outcome: PurchaseOutcome

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> PurchaseOutcome:
        return self.outcome


@dataclass(frozen=True)
class PurchaseFailure:
    """
    Failure variant of a purchase result.

    `reservation_reason` and `refund_reason` are only set for
    reservation failures and refund failures respectively.
    """

    kind: PurchaseErrorKind
    detail: str
    reservation_reason: Optional[str] = None
    refund_reason: Optional[str] = None

    @classmethod
    def from_error(cls, error: TicketPurchaseError) -> "PurchaseFailure":
        return cls(
            kind=error.kind,
            detail=error.detail,
            reservation_reason=getattr(error, "reservation_reason", None),
            refund_reason=getattr(error, "refund_reason", None),
        )

    @property
    def ok(self) -> bool:
        return False

    @property
    def is_validation_error(self) -> bool:
        return self.kind in VALIDATION_KINDS

    @property
    def requires_manual_intervention(self) -> bool:
        return self.kind is PurchaseErrorKind.REFUND_FAILED

    @property
    def retryable(self) -> bool:
        """
        True when a fresh call with the same arguments may succeed:
        nothing was committed and no money is held.
        """
        return self.kind in (
            PurchaseErrorKind.PAYMENT_FAILED,
            PurchaseErrorKind.RESERVATION_FAILED,
        )

    def to_error(self) -> TicketPurchaseError:
        if self.kind is PurchaseErrorKind.RESERVATION_FAILED:
            return ReservationFailedError(self.detail, self.reservation_reason or "")
        if self.kind is PurchaseErrorKind.REFUND_FAILED:
            return RefundFailedError(
                self.detail,
                self.reservation_reason or "",
                self.refund_reason or "",
            )
        return ERRORS_BY_KIND[self.kind](self.detail)

    def unwrap(self) -> PurchaseOutcome:
        raise self.to_error()


PurchaseResult = Union[PurchaseSuccess, PurchaseFailure]
