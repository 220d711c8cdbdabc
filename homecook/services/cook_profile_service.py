# homecook/services/cook_profile_service.py
"""
Cook profile operations.

Profiles are upserted by their owner: created if absent, otherwise patched.
`average_rating` and `total_reviews` belong to the review flow and are never
written from here.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from homecook.config.settings import settings
from homecook.models.common import Actor, Coordinates, Role, utc_now
from homecook.models.cook_profile import CookListing, CookProfile, CookProfileInput
from homecook.models.meal import CUISINE_TYPES
from homecook.services import geo
from homecook.services.errors import Forbidden, InvalidRequest, NotFound
from homecook.store.base import COOK_PROFILES, DocumentStore, contains, gt

logger = logging.getLogger(__name__)

# Fields a profile edit may write. Aggregates are deliberately absent.
_EDITABLE_FIELDS = {
    "display_name",
    "bio",
    "cuisine_types",
    "delivery_available",
    "delivery_radius",
    "delivery_fee",
    "minimum_order_amount",
    "available_days",
    "location",
    "updated_at",
}


def _to_profile(doc: dict) -> CookProfile:
    doc = dict(doc)
    doc.setdefault("uid", doc.get("id"))
    return CookProfile.model_validate(doc)


class CookProfileService:

    def __init__(self, store: DocumentStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or utc_now

    async def get_cook_profile(self, cook_id: str) -> Optional[CookProfile]:
        doc = await self.store.get(COOK_PROFILES, cook_id)
        return _to_profile(doc) if doc else None

    async def require_cook_profile(self, cook_id: str) -> CookProfile:
        profile = await self.get_cook_profile(cook_id)
        if profile is None:
            raise NotFound("Cook profile not found", {"cook_id": cook_id})
        return profile

    async def upsert_cook_profile(self, actor: Actor, profile_input: CookProfileInput) -> CookProfile:
        if actor.role != Role.COOK:
            raise Forbidden("Only cooks can update cook profiles", {"role": actor.role.value})

        now = self.clock()
        existing = await self.get_cook_profile(actor.uid)
        fields = profile_input.model_dump(exclude={"coordinates"})
        if profile_input.coordinates is not None:
            fields["location"] = profile_input.coordinates
        elif existing is not None:
            fields["location"] = existing.location
        if not fields.get("display_name"):
            fields["display_name"] = (existing.display_name if existing else None) or actor.display_name

        if existing is None:
            profile = CookProfile(
                uid=actor.uid,
                average_rating=0.0,
                total_reviews=0,
                created_at=now,
                updated_at=now,
                **fields,
            )
            await self.store.put(COOK_PROFILES, actor.uid, profile.to_document())
            logger.info("Cook profile created uid=%s", actor.uid)
            return profile

        profile = CookProfile.model_validate(
            {**existing.model_dump(), **fields, "updated_at": now}
        )
        await self.store.patch(
            COOK_PROFILES,
            actor.uid,
            profile.model_dump(mode="json", include=_EDITABLE_FIELDS),
        )
        logger.info("Cook profile updated uid=%s", actor.uid)
        return profile

    async def update_cook_location(self, actor: Actor, coordinates: Coordinates) -> CookProfile:
        if actor.role != Role.COOK:
            raise Forbidden("Only cooks have a cook profile location")
        profile = await self.require_cook_profile(actor.uid)
        profile = profile.model_copy(update={"location": coordinates, "updated_at": self.clock()})
        await self.store.patch(
            COOK_PROFILES,
            actor.uid,
            profile.model_dump(mode="json", include={"location", "updated_at"}),
        )
        return profile

    async def list_cooks_by_cuisine(self, cuisine_type: str) -> List[CookProfile]:
        if cuisine_type not in CUISINE_TYPES:
            raise InvalidRequest("Unknown cuisine type", {"cuisine_type": cuisine_type})
        docs = await self.store.query(COOK_PROFILES, [contains("cuisine_types", cuisine_type)])
        return [_to_profile(d) for d in docs]

    async def top_rated_cooks(self, limit: int = 10) -> List[CookProfile]:
        """Cooks with at least one review and a rating at or above the configured floor."""
        docs = await self.store.query(COOK_PROFILES, [gt("total_reviews", 0)])
        profiles = [
            p
            for p in (_to_profile(d) for d in docs)
            if p.average_rating >= settings.top_rated_min_rating
        ]
        profiles.sort(key=lambda p: (p.average_rating, p.total_reviews), reverse=True)
        return profiles[:limit]

    async def find_nearby_cooks(
        self, origin: Coordinates, radius_km: Optional[float] = None
    ) -> List[CookListing]:
        """Cooks with a known location within `radius_km`, nearest first."""
        radius = settings.default_discovery_radius_km if radius_km is None else radius_km
        docs = await self.store.query(COOK_PROFILES)
        listings = []
        for profile in (_to_profile(d) for d in docs):
            if profile.location is None:
                continue
            dist = geo.distance_km(origin, profile.location)
            if geo.within_radius(dist, radius):
                listings.append(
                    CookListing(profile=profile, distance_km=dist, distance_label=geo.format_distance(dist))
                )
        return geo.sort_nearest_first(listings, lambda item: item.distance_km)
