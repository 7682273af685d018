from enum import Enum


class PurchaseErrorKind(str, Enum):
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    INVALID_ACCOUNT = "INVALID_ACCOUNT"
    EMPTY_REQUEST = "EMPTY_REQUEST"
    TOO_MANY_TICKETS = "TOO_MANY_TICKETS"
    MISSING_ADULT = "MISSING_ADULT"
    INFANT_RATIO_EXCEEDED = "INFANT_RATIO_EXCEEDED"
    DUPLICATE_REQUEST = "DUPLICATE_REQUEST"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    RESERVATION_FAILED = "RESERVATION_FAILED"
    REFUND_FAILED = "REFUND_FAILED"


VALIDATION_KINDS = frozenset(
    {
        PurchaseErrorKind.INVALID_ARGUMENT,
        PurchaseErrorKind.INVALID_ACCOUNT,
        PurchaseErrorKind.EMPTY_REQUEST,
        PurchaseErrorKind.TOO_MANY_TICKETS,
        PurchaseErrorKind.MISSING_ADULT,
        PurchaseErrorKind.INFANT_RATIO_EXCEEDED,
    }
)


class TicketPurchaseError(Exception):
    """
    Base exception for all domain-level errors
    raised while purchasing tickets.
    """

    kind: PurchaseErrorKind

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.detail}"


class InvalidLineItemError(TicketPurchaseError, ValueError):
    """Raised when a ticket line item cannot be constructed."""

    kind = PurchaseErrorKind.INVALID_ARGUMENT


class PurchaseValidationError(TicketPurchaseError):
    """
    Raised when a request breaks a business rule.
    No collaborator has been called when this is raised.
    """


class InvalidAccountError(PurchaseValidationError):
    kind = PurchaseErrorKind.INVALID_ACCOUNT


class EmptyRequestError(PurchaseValidationError):
    kind = PurchaseErrorKind.EMPTY_REQUEST


class TooManyTicketsError(PurchaseValidationError):
    kind = PurchaseErrorKind.TOO_MANY_TICKETS


class MissingAdultError(PurchaseValidationError):
    kind = PurchaseErrorKind.MISSING_ADULT


class InfantRatioExceededError(PurchaseValidationError):
    kind = PurchaseErrorKind.INFANT_RATIO_EXCEEDED


class DuplicateRequestError(TicketPurchaseError):
    """Raised when an identical request has already been fulfilled."""

    kind = PurchaseErrorKind.DUPLICATE_REQUEST


class PaymentFailedError(TicketPurchaseError):
    """Raised when the charge was declined. Nothing needs reversing."""

    kind = PurchaseErrorKind.PAYMENT_FAILED


class ReservationFailedError(TicketPurchaseError):
    """
    Raised when seats could not be reserved and the charge
    was refunded. The request can be retried as a new request.
    """

    kind = PurchaseErrorKind.RESERVATION_FAILED

    def __init__(self, detail: str, reservation_reason: str):
        self.reservation_reason = reservation_reason
        super().__init__(detail)


class RefundFailedError(TicketPurchaseError):
    """
    Raised when seats could not be reserved and the refund
    was also rejected. The account may have been charged without
    a seat, so an operator must reconcile it by hand.
    """

    kind = PurchaseErrorKind.REFUND_FAILED

    def __init__(self, detail: str, reservation_reason: str, refund_reason: str):
        self.reservation_reason = reservation_reason
        self.refund_reason = refund_reason
        super().__init__(detail)


class GatewayError(Exception):
    """Raised by payment and seat reservation adapters when a call fails."""


ERRORS_BY_KIND = {
    error_cls.kind: error_cls
    for error_cls in (
        InvalidLineItemError,
        InvalidAccountError,
        EmptyRequestError,
        TooManyTicketsError,
        MissingAdultError,
        InfantRatioExceededError,
        DuplicateRequestError,
        PaymentFailedError,
        ReservationFailedError,
        RefundFailedError,
    )
}
