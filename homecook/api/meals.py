# homecook/api/meals.py
"""
Meal endpoints: cook-side CRUD plus customer browsing with optional distance.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel

from homecook.api.deps import get_actor, get_meal_service, get_review_service
from homecook.models.common import Actor, Coordinates
from homecook.models.meal import Meal, MealInput, MealListing
from homecook.models.review import Review
from homecook.services.meal_service import MealService
from homecook.services.review_service import ReviewService

router = APIRouter()


class AvailabilityChange(BaseModel):
    available: bool


@router.post("", response_model=Meal, status_code=201)
async def create_meal(
    meal_input: MealInput,
    actor: Actor = Depends(get_actor),
    service: MealService = Depends(get_meal_service),
):
    return await service.create_meal(actor, meal_input)


@router.get("", response_model=List[MealListing])
async def browse_meals(
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lng: Optional[float] = Query(default=None, ge=-180, le=180),
    radius_km: float = Query(default=0, ge=0, description="0 means any distance"),
    nearby_first: bool = False,
    cuisine: Optional[str] = None,
    limit: Optional[int] = Query(default=None, gt=0, le=100),
    service: MealService = Depends(get_meal_service),
):
    origin = Coordinates(latitude=lat, longitude=lng) if lat is not None and lng is not None else None
    return await service.discover_meals(
        origin=origin,
        radius_km=radius_km,
        nearby_first=nearby_first,
        cuisine_type=cuisine,
        limit=limit,
    )


@router.get("/{meal_id}", response_model=Meal)
async def get_meal(meal_id: str, service: MealService = Depends(get_meal_service)):
    return await service.get_meal(meal_id)


@router.put("/{meal_id}", response_model=Meal)
async def update_meal(
    meal_id: str,
    meal_input: MealInput,
    actor: Actor = Depends(get_actor),
    service: MealService = Depends(get_meal_service),
):
    return await service.update_meal(actor, meal_id, meal_input)


@router.patch("/{meal_id}/availability", response_model=Meal)
async def set_availability(
    meal_id: str,
    change: AvailabilityChange,
    actor: Actor = Depends(get_actor),
    service: MealService = Depends(get_meal_service),
):
    return await service.set_meal_availability(actor, meal_id, change.available)


@router.delete("/{meal_id}", status_code=204)
async def delete_meal(
    meal_id: str,
    actor: Actor = Depends(get_actor),
    service: MealService = Depends(get_meal_service),
):
    await service.delete_meal(actor, meal_id)
    return Response(status_code=204)


@router.get("/{meal_id}/reviews", response_model=List[Review])
async def meal_reviews(
    meal_id: str,
    limit: int = Query(default=10, gt=0, le=100),
    service: ReviewService = Depends(get_review_service),
):
    return await service.list_reviews_for_meal(meal_id, limit=limit)
