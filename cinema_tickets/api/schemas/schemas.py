from pydantic import BaseModel, Field, StrictInt


class TicketLineItemRequest(BaseModel):
    type: str
    count: StrictInt


class PurchaseRequest(BaseModel):
    account_id: StrictInt | None = None
    tickets: list[TicketLineItemRequest] = Field(default_factory=list)


class PurchaseResponse(BaseModel):
    amount_charged: int
    seats_reserved: int


class PurchaseErrorDetail(BaseModel):
    kind: str
    message: str
    requires_manual_intervention: bool = False
