"""
Meal documents, owned by exactly one cook.
"""
from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from homecook.models.common import Coordinates, to_money

CUISINE_TYPES = (
    "American",
    "Italian",
    "Mexican",
    "Chinese",
    "Indian",
    "Japanese",
    "Thai",
    "Mediterranean",
    "Middle Eastern",
    "Korean",
    "Vietnamese",
    "French",
    "Spanish",
    "Greek",
    "Caribbean",
    "African",
    "Vegetarian",
    "Vegan",
    "Desserts",
    "Breakfast",
    "Other",
)

WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_TIME_RE = re.compile(r"^([01]?\d|2[0-3]):[0-5]\d$")


def _clean_strings(values: List[str]) -> List[str]:
    return [v.strip() for v in values if v and v.strip()]


def _check_cuisine(value: str) -> str:
    if value not in CUISINE_TYPES:
        raise ValueError(f"unknown cuisine type {value!r}")
    return value


class DayAvailability(BaseModel):
    available: bool = False
    start_time: Optional[str] = None  # "HH:MM"
    end_time: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _hh_mm(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        if not _TIME_RE.match(v):
            raise ValueError("time must look like HH:MM")
        return v


AvailabilitySchedule = Dict[str, DayAvailability]


class MealInput(BaseModel):
    """Fields a cook supplies when creating or replacing a meal."""

    name: str = Field(..., min_length=1, max_length=120)
    description: str = Field(default="", max_length=2000)
    price: Decimal = Field(..., gt=0)
    image_url: Optional[str] = None
    ingredients: List[str] = Field(..., min_length=1)
    allergens: List[str] = Field(default_factory=list)
    cuisine_type: str
    preparation_time: int = Field(..., gt=0)
    available: bool = True
    availability_schedule: AvailabilitySchedule = Field(default_factory=dict)

    @field_validator("price", mode="before")
    @classmethod
    def _money(cls, v):
        return to_money(v)

    @field_validator("ingredients")
    @classmethod
    def _ingredients(cls, v: List[str]) -> List[str]:
        cleaned = _clean_strings(v)
        if not cleaned:
            raise ValueError("at least one ingredient is required")
        return cleaned

    @field_validator("allergens")
    @classmethod
    def _allergens(cls, v: List[str]) -> List[str]:
        return _clean_strings(v)

    @field_validator("cuisine_type")
    @classmethod
    def _cuisine(cls, v: str) -> str:
        return _check_cuisine(v)

    @field_validator("availability_schedule")
    @classmethod
    def _weekdays(cls, v: AvailabilitySchedule) -> AvailabilitySchedule:
        unknown = [day for day in v if day not in WEEKDAYS]
        if unknown:
            raise ValueError(f"unknown weekday(s): {', '.join(unknown)}")
        return v


class Meal(MealInput):
    id: str
    cook_id: str
    location: Optional[Coordinates] = None
    created_at: datetime
    updated_at: datetime

    def to_document(self) -> dict:
        return self.model_dump(mode="json")


class MealListing(BaseModel):
    """A meal annotated with its distance from the browsing customer, if known."""

    meal: Meal
    distance_km: Optional[float] = None
    distance_label: Optional[str] = None
