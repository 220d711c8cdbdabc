"""Document models for the home cooking marketplace."""
from homecook.models.common import Actor, Coordinates, LocationAddress, Role
from homecook.models.cook_profile import CookListing, CookProfile, CookProfileInput
from homecook.models.meal import CUISINE_TYPES, WEEKDAYS, DayAvailability, Meal, MealInput, MealListing
from homecook.models.order import (
    TERMINAL_STATUSES,
    Delivery,
    DeliveryDetails,
    DeliveryMethod,
    Order,
    OrderInput,
    OrderStatus,
    Pickup,
    ReorderDraft,
)
from homecook.models.review import Review, ReviewInput

# Export all models
__all__ = [
    "Actor",
    "Coordinates",
    "LocationAddress",
    "Role",
    "CookListing",
    "CookProfile",
    "CookProfileInput",
    "CUISINE_TYPES",
    "WEEKDAYS",
    "DayAvailability",
    "Meal",
    "MealInput",
    "MealListing",
    "TERMINAL_STATUSES",
    "Delivery",
    "DeliveryDetails",
    "DeliveryMethod",
    "Order",
    "OrderInput",
    "OrderStatus",
    "Pickup",
    "ReorderDraft",
    "Review",
    "ReviewInput",
]
