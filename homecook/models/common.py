"""
Shared value types: identities, coordinates, addresses and money.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

CENT = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    """Quantize a number to two decimal places (fixed point currency)."""
    if isinstance(value, float):
        # go through str so 10.1 stays 10.10 rather than 10.0999...
        value = str(value)
    try:
        return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"not a currency amount: {value!r}") from exc


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    COOK = "cook"
    CUSTOMER = "customer"


class Actor(BaseModel):
    """The authenticated principal making a call, as asserted by the identity provider."""

    model_config = ConfigDict(frozen=True)

    uid: str = Field(..., min_length=1)
    role: Role
    display_name: Optional[str] = None

    @property
    def is_cook(self) -> bool:
        return self.role == Role.COOK

    @property
    def is_customer(self) -> bool:
        return self.role == Role.CUSTOMER


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class LocationAddress(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    formatted_address: Optional[str] = None

    @model_validator(mode="after")
    def _not_empty(self) -> "LocationAddress":
        parts = (
            self.street,
            self.city,
            self.region,
            self.postal_code,
            self.country,
            self.formatted_address,
        )
        if not any(p and p.strip() for p in parts):
            raise ValueError("address must have at least one non-empty field")
        if not self.formatted_address:
            self.formatted_address = ", ".join(
                p for p in parts[:5] if p and p.strip()
            )
        return self
