# homecook/services/meal_service.py
"""
Meal catalog operations.

- Only cooks create meals; only the owning cook edits, toggles or deletes one.
- Availability toggling is a restricted field update (no re-validation of
  the rest of the meal).
- The cook's profile location is copied onto the meal at creation time so
  discovery can compute distances without a join.
- Listing helpers mirror the queries the clients issue: by cook, available,
  by cuisine, and nearby-with-distance.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from homecook.config.settings import settings
from homecook.models.common import Actor, Coordinates, Role, utc_now
from homecook.models.meal import CUISINE_TYPES, Meal, MealInput, MealListing
from homecook.services import geo
from homecook.services.errors import Forbidden, InvalidRequest, NotFound
from homecook.store.base import COOK_PROFILES, MEALS, DocumentStore, eq

logger = logging.getLogger(__name__)


class MealService:

    def __init__(self, store: DocumentStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or utc_now

    # -----------------------
    # Internal helpers
    # -----------------------
    async def _load_owned(self, actor: Actor, meal_id: str) -> Meal:
        meal = await self.get_meal(meal_id)
        if actor.role != Role.COOK or meal.cook_id != actor.uid:
            raise Forbidden(
                "You can only change your own meals", {"meal_id": meal_id}
            )
        return meal

    async def _cook_location(self, cook_id: str) -> Optional[Coordinates]:
        doc = await self.store.get(COOK_PROFILES, cook_id)
        if not doc or not doc.get("location"):
            return None
        return Coordinates.model_validate(doc["location"])

    # -----------------------
    # Public API
    # -----------------------
    async def create_meal(self, actor: Actor, meal_input: MealInput) -> Meal:
        if actor.role != Role.COOK:
            raise Forbidden("Only cooks can create meals", {"role": actor.role.value})

        now = self.clock()
        meal = Meal(
            id=uuid.uuid4().hex,
            cook_id=actor.uid,
            location=await self._cook_location(actor.uid),
            created_at=now,
            updated_at=now,
            **meal_input.model_dump(),
        )
        await self.store.put(MEALS, meal.id, meal.to_document())
        logger.info("Meal created id=%s cook=%s name=%r", meal.id, actor.uid, meal.name)
        return meal

    async def update_meal(self, actor: Actor, meal_id: str, meal_input: MealInput) -> Meal:
        """Replace the editable fields of a meal. Existing orders keep their own snapshot."""
        existing = await self._load_owned(actor, meal_id)
        updated = Meal.model_validate(
            {**existing.model_dump(), **meal_input.model_dump(), "updated_at": self.clock()}
        )
        await self.store.patch(
            MEALS,
            meal_id,
            updated.model_dump(mode="json", exclude={"id", "cook_id", "created_at", "location"}),
        )
        logger.info("Meal updated id=%s cook=%s", meal_id, actor.uid)
        return updated

    async def set_meal_availability(self, actor: Actor, meal_id: str, available: bool) -> Meal:
        existing = await self._load_owned(actor, meal_id)
        updated = existing.model_copy(
            update={"available": bool(available), "updated_at": self.clock()}
        )
        await self.store.patch(
            MEALS,
            meal_id,
            updated.model_dump(mode="json", include={"available", "updated_at"}),
        )
        logger.info("Meal %s availability -> %s", meal_id, updated.available)
        return updated

    async def delete_meal(self, actor: Actor, meal_id: str) -> None:
        await self._load_owned(actor, meal_id)
        await self.store.delete(MEALS, meal_id)
        logger.info("Meal deleted id=%s cook=%s", meal_id, actor.uid)

    async def get_meal(self, meal_id: str) -> Meal:
        doc = await self.store.get(MEALS, meal_id)
        if doc is None:
            raise NotFound("Meal not found", {"meal_id": meal_id})
        return Meal.model_validate(doc)

    async def list_cook_meals(self, cook_id: str) -> List[Meal]:
        docs = await self.store.query(
            MEALS, [eq("cook_id", cook_id)], order_by="created_at", descending=True
        )
        return [Meal.model_validate(d) for d in docs]

    async def list_available_meals(self, limit: Optional[int] = None) -> List[Meal]:
        docs = await self.store.query(
            MEALS,
            [eq("available", True)],
            order_by="created_at",
            descending=True,
            limit=limit or settings.available_meals_limit,
        )
        return [Meal.model_validate(d) for d in docs]

    async def search_meals_by_cuisine(self, cuisine_type: str) -> List[Meal]:
        if cuisine_type not in CUISINE_TYPES:
            raise InvalidRequest("Unknown cuisine type", {"cuisine_type": cuisine_type})
        docs = await self.store.query(
            MEALS,
            [eq("cuisine_type", cuisine_type), eq("available", True)],
            order_by="created_at",
            descending=True,
        )
        return [Meal.model_validate(d) for d in docs]

    async def discover_meals(
        self,
        origin: Optional[Coordinates] = None,
        radius_km: float = 0,
        nearby_first: bool = False,
        cuisine_type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[MealListing]:
        """
        Browse available meals, annotated with distance from `origin` when known.

        radius_km=0 means any distance. Meals without a location are kept and,
        with nearby_first, listed after every meal that has a distance.
        """
        if cuisine_type:
            meals = await self.search_meals_by_cuisine(cuisine_type)
        else:
            meals = await self.list_available_meals(limit=limit)

        listings = []
        for meal in meals:
            dist = geo.distance_between(origin, meal.location)
            if not geo.within_radius(dist, radius_km):
                continue
            listings.append(
                MealListing(meal=meal, distance_km=dist, distance_label=geo.format_distance(dist))
            )
        if nearby_first:
            listings = geo.sort_nearest_first(listings, lambda item: item.distance_km)
        logger.debug(
            "discover_meals origin=%s radius=%s fetched=%d kept=%d",
            bool(origin),
            radius_km,
            len(meals),
            len(listings),
        )
        return listings
