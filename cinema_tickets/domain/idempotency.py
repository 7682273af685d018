# cinema_tickets/domain/idempotency.py

import hashlib
import json
from dataclasses import dataclass
from typing import Iterable, Tuple

from cinema_tickets.domain.tickets import TICKET_TYPE_ORDER, TicketLineItem


@dataclass(frozen=True)
class IdempotencyKey:
    """
    Canonical fingerprint of a purchase request.

    Line items are stably sorted by ticket type, so two requests that
    differ only in line-item order produce equal keys. Items of the same
    type keep their relative order and are not merged.

    Known limitation: the key carries nothing beyond the account and the
    ticket mix, so two genuinely separate purchases of the same mix by
    the same account collide and the second is rejected as a duplicate.
    """

    account_id: int
    items: Tuple[TicketLineItem, ...]

    @classmethod
    def from_request(
        cls,
        account_id: int,
        items: Iterable[TicketLineItem],
    ) -> "IdempotencyKey":
        canonical = sorted(items, key=lambda item: TICKET_TYPE_ORDER[item.type])
        return cls(account_id=account_id, items=tuple(canonical))

    @property
    def fingerprint(self) -> str:
        payload = {
            "account_id": self.account_id,
            "items": [[item.type.value, item.count] for item in self.items],
        }
        encoded = json.dumps(payload, sort_keys=True).encode("utf-8")
        return hashlib.sha256(encoded).hexdigest()

    def __str__(self) -> str:
        items = ",".join(str(item) for item in self.items)
        return f"{self.account_id}:[{items}]"
