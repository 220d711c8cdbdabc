# homecook/services/review_service.py
"""
Review creation and listing.

Creation re-checks everything the client-side `can_review` flag suggests:
the order must exist, belong to the requesting customer, be completed, and
not already have a review. After the review is stored the cook's running
average is folded forward.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from homecook.models.common import Actor, Role, utc_now
from homecook.models.order import Order
from homecook.models.review import Review, ReviewInput
from homecook.services import order_rules
from homecook.services.errors import AlreadyReviewed, Forbidden, NotFound, OrderNotCompleted
from homecook.store.base import COOK_PROFILES, ORDERS, REVIEWS, DocumentStore, eq

logger = logging.getLogger(__name__)


class ReviewService:

    def __init__(self, store: DocumentStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or utc_now

    async def has_review(self, order_id: str) -> bool:
        existing = await self.store.query(REVIEWS, [eq("order_id", order_id)], limit=1)
        return bool(existing)

    async def create_review(self, actor: Actor, review_input: ReviewInput) -> Review:
        if actor.role != Role.CUSTOMER:
            raise Forbidden("Only customers can create reviews", {"role": actor.role.value})

        doc = await self.store.get(ORDERS, review_input.order_id)
        if doc is None:
            raise NotFound("Order not found", {"order_id": review_input.order_id})
        order = Order.model_validate(doc)

        if order.customer_id != actor.uid:
            raise Forbidden("You can only review your own orders", {"order_id": order.id})
        if not order_rules.can_review(order):
            raise OrderNotCompleted(
                "You can only review completed orders",
                {"order_id": order.id, "status": order.status.value},
            )
        if await self.has_review(order.id):
            raise AlreadyReviewed("You have already reviewed this order", {"order_id": order.id})

        review = Review(
            id=uuid.uuid4().hex,
            order_id=order.id,
            customer_id=actor.uid,
            customer_name=actor.display_name or order.customer_name,
            cook_id=order.cook_id,
            meal_id=order.meal_id,
            meal_name=order.meal_name,
            rating=review_input.rating,
            comment=review_input.comment,
            created_at=self.clock(),
        )
        await self.store.put(REVIEWS, review.id, review.to_document())
        await self._fold_rating(order.cook_id, review.rating)
        logger.info(
            "Review created id=%s order=%s cook=%s rating=%d",
            review.id,
            order.id,
            order.cook_id,
            review.rating,
        )
        return review

    async def _fold_rating(self, cook_id: str, rating: int) -> None:
        profile = await self.store.get(COOK_PROFILES, cook_id)
        if profile is None:
            logger.warning("No cook profile for %s; rating aggregate not updated", cook_id)
            return
        current = float(profile.get("average_rating") or 0)
        total = int(profile.get("total_reviews") or 0)
        new_total = total + 1
        await self.store.patch(
            COOK_PROFILES,
            cook_id,
            {
                "average_rating": round((current * total + rating) / new_total, 4),
                "total_reviews": new_total,
            },
        )

    async def list_reviews_for_cook(self, cook_id: str, limit: int = 10) -> List[Review]:
        docs = await self.store.query(
            REVIEWS, [eq("cook_id", cook_id)], order_by="created_at", descending=True, limit=limit
        )
        return [Review.model_validate(d) for d in docs]

    async def list_reviews_for_meal(self, meal_id: str, limit: int = 10) -> List[Review]:
        docs = await self.store.query(
            REVIEWS, [eq("meal_id", meal_id)], order_by="created_at", descending=True, limit=limit
        )
        return [Review.model_validate(d) for d in docs]
