"""
Cook profile documents. One per cook; the document id is the cook's uid.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from homecook.models.common import Coordinates, to_money
from homecook.models.meal import CUISINE_TYPES, WEEKDAYS


def _money_or_none(v):
    if v is None or v == "":
        return None
    return to_money(v)


class CookProfileInput(BaseModel):
    display_name: Optional[str] = None
    bio: str = Field(default="", max_length=2000)
    cuisine_types: List[str] = Field(..., min_length=1)
    delivery_available: bool = False
    delivery_radius: Optional[float] = Field(default=None, gt=0)  # km
    delivery_fee: Optional[Decimal] = Field(default=None, ge=0)
    minimum_order_amount: Optional[Decimal] = Field(default=None, ge=0)
    available_days: List[str] = Field(default_factory=list)
    coordinates: Optional[Coordinates] = None

    @field_validator("delivery_fee", "minimum_order_amount", mode="before")
    @classmethod
    def _money(cls, v):
        return _money_or_none(v)

    @field_validator("cuisine_types")
    @classmethod
    def _cuisines(cls, v: List[str]) -> List[str]:
        unknown = [c for c in v if c not in CUISINE_TYPES]
        if unknown:
            raise ValueError(f"unknown cuisine type(s): {', '.join(unknown)}")
        # de-duplicate, keep order
        return list(dict.fromkeys(v))

    @field_validator("available_days")
    @classmethod
    def _days(cls, v: List[str]) -> List[str]:
        unknown = [d for d in v if d not in WEEKDAYS]
        if unknown:
            raise ValueError(f"unknown weekday(s): {', '.join(unknown)}")
        return list(dict.fromkeys(v))


class CookProfile(BaseModel):
    uid: str
    display_name: Optional[str] = None
    bio: str = ""
    cuisine_types: List[str] = Field(default_factory=list)
    delivery_available: bool = False
    delivery_radius: Optional[float] = None
    delivery_fee: Optional[Decimal] = None
    minimum_order_amount: Optional[Decimal] = None
    available_days: List[str] = Field(default_factory=list)
    location: Optional[Coordinates] = None

    # owned by the review subsystem; profile edits never write these
    average_rating: float = 0.0
    total_reviews: int = 0

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("delivery_fee", "minimum_order_amount", mode="before")
    @classmethod
    def _money(cls, v):
        return _money_or_none(v)

    def to_document(self) -> dict:
        return self.model_dump(mode="json")


class CookListing(BaseModel):
    profile: CookProfile
    distance_km: Optional[float] = None
    distance_label: Optional[str] = None
