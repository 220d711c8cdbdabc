# homecook/services/order_service.py
"""
Order service: create orders, drive their status, and list them per role.

- The document store is injected; nothing here reaches for a global client.
- Pricing runs once at creation and the quote is frozen on the order.
- A status change reads the current order, runs the transition engine, and
  writes back only `status` and `updated_at`. There is no concurrency token:
  two racing writers resolve last-writer-wins on that field pair.
- Errors propagate to the caller as HomeCookError subclasses; nothing is
  retried, so a retried create may produce a duplicate order.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from pydantic import ValidationError

from homecook.models.common import Actor, Role, utc_now
from homecook.models.cook_profile import CookProfile
from homecook.models.meal import Meal
from homecook.models.order import (
    TERMINAL_STATUSES,
    DeliveryMethod,
    Order,
    OrderInput,
    OrderStatus,
    ReorderDraft,
)
from homecook.services import order_rules
from homecook.services.errors import (
    Forbidden,
    IllegalTransition,
    InvalidRequest,
    NotFound,
    StoreUnavailable,
)
from homecook.services.order_views import OrderPartition, customer_order_list, partition_cook_orders
from homecook.services.pricing import ensure_minimum_order, quote_order
from homecook.store.base import COOK_PROFILES, MEALS, ORDERS, DocumentStore, eq, not_in

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_TERMINAL_VALUES = sorted(s.value for s in TERMINAL_STATUSES)


def _to_order(doc: dict) -> Order:
    try:
        return Order.model_validate(doc)
    except ValidationError as exc:
        logger.error("Malformed order document id=%s: %s", doc.get("id"), exc)
        raise StoreUnavailable(
            "Stored order is malformed", {"order_id": doc.get("id")}
        ) from exc


class OrderService:

    def __init__(self, store: DocumentStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock: Clock = clock or utc_now

    # -----------------------
    # Internal helpers
    # -----------------------
    async def _load_order(self, order_id: str) -> Order:
        doc = await self.store.get(ORDERS, order_id)
        if doc is None:
            raise NotFound("Order not found", {"order_id": order_id})
        return _to_order(doc)

    async def _load_cook_profile(self, cook_id: str) -> Optional[CookProfile]:
        doc = await self.store.get(COOK_PROFILES, cook_id)
        if doc is None:
            return None
        doc.setdefault("uid", cook_id)
        return CookProfile.model_validate(doc)

    # -----------------------
    # Create
    # -----------------------
    async def create_order(self, actor: Actor, order_input: OrderInput) -> Order:
        """
        Place an order for one meal.

        Raises:
            Forbidden: actor is not a customer
            NotFound: meal does not exist
            InvalidRequest: meal unavailable, delivery not offered, or requested time not in the future
            BelowMinimumOrder: total under the cook's minimum order amount
        """
        if actor.role != Role.CUSTOMER:
            raise Forbidden("Only customers can place orders", {"role": actor.role.value})

        meal_doc = await self.store.get(MEALS, order_input.meal_id)
        if meal_doc is None:
            raise NotFound("Meal not found", {"meal_id": order_input.meal_id})
        meal = Meal.model_validate(meal_doc)
        if not meal.available:
            raise InvalidRequest(
                "This meal is currently unavailable", {"meal_id": meal.id}
            )

        now = self.clock()
        if order_input.requested_time <= now:
            raise InvalidRequest(
                "Requested time must be in the future",
                {"requested_time": order_input.requested_time.isoformat()},
            )

        profile = await self._load_cook_profile(meal.cook_id)
        if order_input.delivery_method == DeliveryMethod.DELIVERY and not (
            profile and profile.delivery_available
        ):
            raise InvalidRequest(
                "This cook does not offer delivery", {"cook_id": meal.cook_id}
            )

        quote = quote_order(meal, order_input.quantity, order_input.delivery_method, profile)
        ensure_minimum_order(quote.total, profile)

        order = Order(
            id=uuid.uuid4().hex,
            customer_id=actor.uid,
            customer_name=actor.display_name or "Customer",
            cook_id=meal.cook_id,
            cook_name=(profile.display_name if profile else None) or "Cook",
            meal_id=meal.id,
            meal_name=meal.name,
            meal_image_url=meal.image_url,
            quantity=order_input.quantity,
            subtotal=quote.subtotal,
            delivery_fee=quote.delivery_fee,
            total_amount=quote.total,
            delivery=order_input.delivery,
            requested_time=order_input.requested_time,
            special_instructions=order_input.special_instructions,
            status=OrderStatus.NEW,
            created_at=now,
            updated_at=now,
        )
        await self.store.put(ORDERS, order.id, order.to_document())
        logger.info(
            "Order created id=%s customer=%s cook=%s meal=%s total=%s method=%s",
            order.id,
            order.customer_id,
            order.cook_id,
            order.meal_id,
            order.total_amount,
            order.delivery_method.value,
        )
        return order

    # -----------------------
    # Transitions
    # -----------------------
    async def update_order_status(
        self, actor: Actor, order_id: str, status: OrderStatus
    ) -> Order:
        order = await self._load_order(order_id)
        try:
            updated = order_rules.apply_transition(actor, order, status, now=self.clock())
        except (Forbidden, IllegalTransition) as exc:
            logger.warning(
                "Rejected transition order=%s %s -> %s by %s:%s (%s)",
                order_id,
                order.status.value,
                OrderStatus(status).value,
                actor.role.value,
                actor.uid,
                exc.code,
            )
            raise
        await self.store.patch(
            ORDERS,
            order_id,
            updated.model_dump(mode="json", include={"status", "updated_at"}),
        )
        logger.info(
            "Order %s moved %s -> %s by %s",
            order_id,
            order.status.value,
            updated.status.value,
            actor.role.value,
        )
        return updated

    async def cancel_order(self, actor: Actor, order_id: str) -> Order:
        return await self.update_order_status(actor, order_id, OrderStatus.CANCELLED)

    # -----------------------
    # Reads
    # -----------------------
    async def get_order(self, actor: Actor, order_id: str) -> Order:
        order = await self._load_order(order_id)
        if actor.uid not in (order.customer_id, order.cook_id):
            raise Forbidden(
                "You do not have permission to view this order", {"order_id": order_id}
            )
        return order

    async def get_order_actions(self, actor: Actor, order_id: str) -> order_rules.OrderActions:
        order = await self.get_order(actor, order_id)
        return order_rules.order_actions(order, actor)

    async def reorder_draft(self, actor: Actor, order_id: str) -> ReorderDraft:
        """Prefill a new order from a completed one (same meal, quantity and delivery)."""
        order = await self.get_order(actor, order_id)
        if actor.role != Role.CUSTOMER or actor.uid != order.customer_id:
            raise Forbidden("Only the ordering customer can reorder", {"order_id": order_id})
        if not order_rules.can_reorder(order):
            raise InvalidRequest(
                "Only completed orders can be reordered",
                {"order_id": order_id, "status": order.status.value},
            )
        return ReorderDraft(
            meal_id=order.meal_id,
            quantity=order.quantity,
            delivery=order.delivery,
            special_instructions=order.special_instructions,
        )

    async def _query_orders(self, party_field: str, uid: str, active_only: bool) -> List[Order]:
        filters = [eq(party_field, uid)]
        if active_only:
            filters.append(not_in("status", _TERMINAL_VALUES))
        docs = await self.store.query(
            ORDERS, filters, order_by="created_at", descending=True
        )
        return [_to_order(d) for d in docs]

    async def list_customer_orders(self, customer_id: str) -> List[Order]:
        return customer_order_list(await self._query_orders("customer_id", customer_id, False))

    async def list_active_customer_orders(self, customer_id: str) -> List[Order]:
        return customer_order_list(await self._query_orders("customer_id", customer_id, True))

    async def list_cook_orders(self, cook_id: str) -> List[Order]:
        return partition_cook_orders(
            await self._query_orders("cook_id", cook_id, False), OrderPartition.ALL
        )

    async def list_active_cook_orders(self, cook_id: str) -> List[Order]:
        return partition_cook_orders(
            await self._query_orders("cook_id", cook_id, True), OrderPartition.ACTIVE
        )

    def cook_board(self, cook_id: str) -> "CookOrderBoard":
        return CookOrderBoard(self, cook_id)


class CookOrderBoard:
    """
    A cook's order list with active / all / history tabs.

    The first `active` view fetches only non-terminal orders. Asking for `all`
    or `history` fetches the full set once; after that switching tabs is a
    local filter until `refresh()`.
    """

    def __init__(self, service: OrderService, cook_id: str):
        self.service = service
        self.cook_id = cook_id
        self._orders: Optional[List[Order]] = None
        self._full = False
        self.fetch_count = 0

    @property
    def has_full_set(self) -> bool:
        return self._full

    async def _fetch(self, full: bool) -> None:
        if full:
            self._orders = await self.service.list_cook_orders(self.cook_id)
        else:
            self._orders = await self.service.list_active_cook_orders(self.cook_id)
        self._full = full
        self.fetch_count += 1

    async def view(self, partition: OrderPartition = OrderPartition.ACTIVE) -> List[Order]:
        partition = OrderPartition(partition)
        if partition == OrderPartition.ACTIVE:
            if self._orders is None:
                await self._fetch(full=False)
        elif not self._full:
            await self._fetch(full=True)
        return partition_cook_orders(self._orders or [], partition)

    def refresh(self) -> None:
        self._orders = None
        self._full = False

    def apply(self, order: Order) -> None:
        """Replace a locally held order after a successful transition."""
        if self._orders is None:
            return
        self._orders = [order if o.id == order.id else o for o in self._orders]
