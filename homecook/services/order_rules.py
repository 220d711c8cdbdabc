# homecook/services/order_rules.py
"""
Order transition engine.

Pure functions over `Order` snapshots: decide whether a requested status
change is legal for the acting identity, and derive the read-only eligibility
flags the clients use (cancel, update, review, reorder). Persisting the result
is the caller's job (see OrderService).

Check order for a transition request:
  1. the actor must be a party of the order in the role they assert -> Forbidden
  2. the target must be a legal successor of the current status -> IllegalTransition
  3. customers may only cancel, and only while new/confirmed -> Forbidden
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel

from homecook.models.common import Actor, Role, utc_now
from homecook.models.order import TERMINAL_STATUSES, DeliveryMethod, Order, OrderStatus
from homecook.services.errors import Forbidden, IllegalTransition

logger = logging.getLogger(__name__)

S = OrderStatus

ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    S.NEW: frozenset({S.CONFIRMED, S.CANCELLED}),
    S.CONFIRMED: frozenset({S.PREPARING, S.CANCELLED}),
    S.PREPARING: frozenset({S.READY, S.CANCELLED}),
    S.READY: frozenset({S.OUT_FOR_DELIVERY, S.COMPLETED, S.CANCELLED}),
    S.OUT_FOR_DELIVERY: frozenset({S.DELIVERED, S.CANCELLED}),
    S.DELIVERED: frozenset({S.COMPLETED}),
    S.COMPLETED: frozenset(),
    S.CANCELLED: frozenset(),
}

CUSTOMER_CANCELLABLE = frozenset({S.NEW, S.CONFIRMED})

# Display order for the successor menu.
_STATUS_ORDER = list(OrderStatus)


def legal_successors(status: OrderStatus) -> FrozenSet[OrderStatus]:
    return ALLOWED_TRANSITIONS[status]


def is_legal_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def is_party(actor: Actor, order: Order) -> bool:
    if actor.role == Role.COOK:
        return actor.uid == order.cook_id
    return actor.uid == order.customer_id


def authorize_transition(actor: Actor, order: Order, target: OrderStatus) -> None:
    """Raise Forbidden / IllegalTransition if `actor` may not move `order` to `target`."""
    if not is_party(actor, order):
        raise Forbidden(
            "You can only update your own orders",
            {"order_id": order.id, "actor": actor.uid, "role": actor.role.value},
        )

    if not is_legal_transition(order.status, target):
        raise IllegalTransition(
            f"Cannot move order from {order.status.label} to {target.label}",
            {
                "order_id": order.id,
                "current": order.status.value,
                "requested": target.value,
                "allowed": sorted(s.value for s in legal_successors(order.status)),
            },
        )

    if actor.role == Role.CUSTOMER:
        if target != S.CANCELLED:
            raise Forbidden(
                "Customers can only cancel orders",
                {"order_id": order.id, "requested": target.value},
            )
        if order.status not in CUSTOMER_CANCELLABLE:
            raise Forbidden(
                "The cook has started on this order; it can no longer be cancelled",
                {"order_id": order.id, "current": order.status.value},
            )


def apply_transition(
    actor: Actor,
    order: Order,
    target: OrderStatus,
    now: Optional[datetime] = None,
) -> Order:
    """
    Validate and apply a status change, returning a new snapshot.

    Only `status` and `updated_at` change. The input order is left untouched.
    """
    target = OrderStatus(target)
    authorize_transition(actor, order, target)
    updated = order.model_copy(update={"status": target, "updated_at": now or utc_now()})
    logger.debug(
        "transition order=%s %s -> %s by %s:%s",
        order.id,
        order.status.value,
        target.value,
        actor.role.value,
        actor.uid,
    )
    return updated


# -----------------------
# Eligibility flags (derived, never stored)
# -----------------------
def can_cancel(order: Order, acting_role: Role) -> bool:
    if acting_role == Role.CUSTOMER:
        return order.status in CUSTOMER_CANCELLABLE
    return order.status not in TERMINAL_STATUSES


def can_update_status(order: Order) -> bool:
    return order.status not in TERMINAL_STATUSES


def can_review(order: Order) -> bool:
    # one-review-per-order is enforced by ReviewService at creation time
    return order.status == S.COMPLETED


def can_reorder(order: Order) -> bool:
    return order.status == S.COMPLETED


def next_status_options(order: Order) -> List[OrderStatus]:
    """
    Successors a cook should be offered for this order.

    The engine accepts every legal successor; this only narrows the menu to
    the path that matches the delivery method.
    """
    options = set(legal_successors(order.status))
    if order.delivery_method == DeliveryMethod.PICKUP:
        options.discard(S.OUT_FOR_DELIVERY)
    elif order.status == S.READY:
        options.discard(S.COMPLETED)
    return [s for s in _STATUS_ORDER if s in options]


class OrderActions(BaseModel):
    order_id: str
    status: OrderStatus
    can_cancel: bool
    can_update_status: bool
    can_review: bool
    can_reorder: bool
    next_statuses: List[OrderStatus]


def order_actions(order: Order, actor: Actor) -> OrderActions:
    """What `actor` may do with `order` right now."""
    party = is_party(actor, order)
    # the flag alone allows a cook to cancel a delivered order; the engine does not
    cancellable = S.CANCELLED in legal_successors(order.status)
    is_cook = party and actor.is_cook
    is_customer = party and actor.is_customer
    return OrderActions(
        order_id=order.id,
        status=order.status,
        can_cancel=party and cancellable and can_cancel(order, actor.role),
        can_update_status=is_cook and can_update_status(order),
        can_review=is_customer and can_review(order),
        can_reorder=is_customer and can_reorder(order),
        next_statuses=next_status_options(order) if is_cook else [],
    )
