"""
Request dependencies: the acting identity and the injected services.

The identity provider sits in front of this API and forwards the verified
principal as headers; they are trusted as-is.
"""
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from homecook.models.common import Actor, Role
from homecook.services.cook_profile_service import CookProfileService
from homecook.services.meal_service import MealService
from homecook.services.order_service import OrderService
from homecook.services.review_service import ReviewService
from homecook.store.base import DocumentStore


def get_store(request: Request) -> DocumentStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Document store not initialized")
    return store


def get_actor(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
    x_user_name: Optional[str] = Header(default=None),
) -> Actor:
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=401, detail="Missing X-User-Id / X-User-Role headers")
    try:
        role = Role(x_user_role.strip().lower())
    except ValueError:
        raise HTTPException(status_code=401, detail=f"Unknown role {x_user_role!r}")
    return Actor(uid=x_user_id.strip(), role=role, display_name=x_user_name)


def get_order_service(store: DocumentStore = Depends(get_store)) -> OrderService:
    return OrderService(store)


def get_meal_service(store: DocumentStore = Depends(get_store)) -> MealService:
    return MealService(store)


def get_cook_profile_service(store: DocumentStore = Depends(get_store)) -> CookProfileService:
    return CookProfileService(store)


def get_review_service(store: DocumentStore = Depends(get_store)) -> ReviewService:
    return ReviewService(store)
