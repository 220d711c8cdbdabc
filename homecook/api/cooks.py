# homecook/api/cooks.py
"""
Cook profile endpoints and cook discovery.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from homecook.api.deps import get_actor, get_cook_profile_service, get_meal_service, get_review_service
from homecook.models.common import Actor, Coordinates
from homecook.models.cook_profile import CookListing, CookProfile, CookProfileInput
from homecook.models.meal import Meal
from homecook.models.review import Review
from homecook.services.cook_profile_service import CookProfileService
from homecook.services.meal_service import MealService
from homecook.services.review_service import ReviewService

router = APIRouter()


@router.put("/me/profile", response_model=CookProfile)
async def upsert_my_profile(
    profile_input: CookProfileInput,
    actor: Actor = Depends(get_actor),
    service: CookProfileService = Depends(get_cook_profile_service),
):
    return await service.upsert_cook_profile(actor, profile_input)


@router.put("/me/location", response_model=CookProfile)
async def update_my_location(
    coordinates: Coordinates,
    actor: Actor = Depends(get_actor),
    service: CookProfileService = Depends(get_cook_profile_service),
):
    return await service.update_cook_location(actor, coordinates)


@router.get("", response_model=List[CookProfile])
async def cooks_by_cuisine(
    cuisine: str,
    service: CookProfileService = Depends(get_cook_profile_service),
):
    return await service.list_cooks_by_cuisine(cuisine)


@router.get("/top-rated", response_model=List[CookProfile])
async def top_rated(
    limit: int = Query(default=10, gt=0, le=100),
    service: CookProfileService = Depends(get_cook_profile_service),
):
    return await service.top_rated_cooks(limit=limit)


@router.get("/nearby", response_model=List[CookListing])
async def nearby_cooks(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_km: Optional[float] = Query(default=None, ge=0),
    service: CookProfileService = Depends(get_cook_profile_service),
):
    return await service.find_nearby_cooks(Coordinates(latitude=lat, longitude=lng), radius_km)


@router.get("/{cook_id}/profile", response_model=CookProfile)
async def get_profile(
    cook_id: str,
    service: CookProfileService = Depends(get_cook_profile_service),
):
    return await service.require_cook_profile(cook_id)


@router.get("/{cook_id}/meals", response_model=List[Meal])
async def cook_meals(cook_id: str, service: MealService = Depends(get_meal_service)):
    return await service.list_cook_meals(cook_id)


@router.get("/{cook_id}/reviews", response_model=List[Review])
async def cook_reviews(
    cook_id: str,
    limit: int = Query(default=10, gt=0, le=100),
    service: ReviewService = Depends(get_review_service),
):
    return await service.list_reviews_for_cook(cook_id, limit=limit)
