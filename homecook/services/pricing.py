# homecook/services/pricing.py
"""
Order pricing. Runs once when an order is created; the result is stored on
the order and never recomputed from the live meal price.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from homecook.models.common import to_money
from homecook.models.cook_profile import CookProfile
from homecook.models.meal import Meal
from homecook.models.order import DeliveryMethod
from homecook.services.errors import BelowMinimumOrder

ZERO = Decimal("0.00")


class PriceQuote(BaseModel):
    subtotal: Decimal
    delivery_fee: Decimal = ZERO
    total: Decimal


def quote_order(
    meal: Meal,
    quantity: int,
    delivery_method: DeliveryMethod,
    cook_profile: Optional[CookProfile] = None,
) -> PriceQuote:
    if quantity < 1:
        raise ValueError("quantity must be positive")
    subtotal = to_money(meal.price * quantity)
    fee = ZERO
    if (
        delivery_method == DeliveryMethod.DELIVERY
        and cook_profile is not None
        and cook_profile.delivery_fee is not None
    ):
        fee = to_money(cook_profile.delivery_fee)
    return PriceQuote(subtotal=subtotal, delivery_fee=fee, total=to_money(subtotal + fee))


def compute_total(
    meal: Meal,
    quantity: int,
    delivery_method: DeliveryMethod,
    cook_profile: Optional[CookProfile] = None,
) -> Decimal:
    return quote_order(meal, quantity, delivery_method, cook_profile).total


def ensure_minimum_order(total: Decimal, cook_profile: Optional[CookProfile]) -> None:
    """Raise BelowMinimumOrder if the cook has a minimum and `total` is under it."""
    if cook_profile is None or cook_profile.minimum_order_amount is None:
        return
    minimum = to_money(cook_profile.minimum_order_amount)
    if total < minimum:
        raise BelowMinimumOrder(
            f"Minimum order for this cook is {minimum}; this order totals {total}",
            {"minimum_order_amount": str(minimum), "total_amount": str(total)},
        )
