"""
Order document and its invariants.

The delivery choice is a tagged variant (`Pickup | Delivery(address)`), so a
delivery order without an address cannot be constructed. Status is a closed
enum; the legal moves between statuses live in `homecook.services.order_rules`.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import AwareDatetime, BaseModel, Field, field_validator

from homecook.models.common import LocationAddress, to_money


class OrderStatus(str, Enum):
    NEW = "new"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        # "out_for_delivery" -> "Out For Delivery"
        return " ".join(w.capitalize() for w in self.value.split("_"))


TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})


class DeliveryMethod(str, Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"


class Pickup(BaseModel):
    method: Literal["pickup"] = "pickup"


class Delivery(BaseModel):
    method: Literal["delivery"] = "delivery"
    address: LocationAddress


DeliveryDetails = Annotated[Union[Pickup, Delivery], Field(discriminator="method")]


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class OrderInput(BaseModel):
    """What a customer submits to place an order."""

    meal_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    delivery: DeliveryDetails = Field(default_factory=Pickup)
    requested_time: AwareDatetime
    special_instructions: Optional[str] = Field(default=None, max_length=500)

    @field_validator("special_instructions")
    @classmethod
    def _strip_instructions(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @property
    def delivery_method(self) -> DeliveryMethod:
        return DeliveryMethod(self.delivery.method)


class ReorderDraft(BaseModel):
    """An order form prefilled from a completed order; the customer picks a new time."""

    meal_id: str
    quantity: int
    delivery: DeliveryDetails
    special_instructions: Optional[str] = None


class Order(BaseModel):
    id: str
    customer_id: str
    customer_name: str = "Customer"
    cook_id: str
    cook_name: str = "Cook"

    meal_id: str
    meal_name: str
    meal_image_url: Optional[str] = None

    quantity: int = Field(..., gt=0)
    subtotal: Decimal
    delivery_fee: Decimal = Decimal("0.00")
    total_amount: Decimal

    delivery: DeliveryDetails
    requested_time: datetime
    special_instructions: Optional[str] = None

    status: OrderStatus = OrderStatus.NEW
    created_at: datetime
    updated_at: datetime

    @field_validator("subtotal", "delivery_fee", "total_amount", mode="before")
    @classmethod
    def _money(cls, v):
        return to_money(v)

    @property
    def delivery_method(self) -> DeliveryMethod:
        return DeliveryMethod(self.delivery.method)

    @property
    def delivery_address(self) -> Optional[LocationAddress]:
        if isinstance(self.delivery, Delivery):
            return self.delivery.address
        return None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_document(self) -> dict:
        return self.model_dump(mode="json")
