# cinema_tickets/config.py

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return int(value)


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    seat_capacity: int = 500
    payment_account_limit: Optional[int] = None


def get_settings() -> Settings:
    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        seat_capacity=int(os.getenv("SEAT_CAPACITY", "500")),
        payment_account_limit=_optional_int("PAYMENT_ACCOUNT_LIMIT"),
    )
