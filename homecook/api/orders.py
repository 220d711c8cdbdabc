# homecook/api/orders.py
"""
Order endpoints.

Customers place and cancel orders; the owning cook moves them forward.
Listing is role aware: customers get one newest-first list, cooks pick a
partition (active / all / history).
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from homecook.api.deps import get_actor, get_order_service
from homecook.models.common import Actor, Role
from homecook.models.order import Order, OrderInput, OrderStatus, ReorderDraft
from homecook.services.order_rules import OrderActions
from homecook.services.order_service import OrderService
from homecook.services.order_views import OrderPartition

router = APIRouter()


class StatusChange(BaseModel):
    status: OrderStatus


@router.post("", response_model=Order, status_code=201)
async def create_order(
    order_input: OrderInput,
    actor: Actor = Depends(get_actor),
    service: OrderService = Depends(get_order_service),
):
    return await service.create_order(actor, order_input)


@router.get("", response_model=List[Order])
async def list_my_orders(
    partition: Optional[OrderPartition] = Query(default=None),
    actor: Actor = Depends(get_actor),
    service: OrderService = Depends(get_order_service),
):
    """Customers: all their orders, newest first. Cooks: the chosen partition, active by default."""
    if actor.role == Role.CUSTOMER:
        if partition == OrderPartition.ACTIVE:
            return await service.list_active_customer_orders(actor.uid)
        return await service.list_customer_orders(actor.uid)
    board = service.cook_board(actor.uid)
    return await board.view(partition or OrderPartition.ACTIVE)


@router.get("/{order_id}", response_model=Order)
async def get_order(
    order_id: str,
    actor: Actor = Depends(get_actor),
    service: OrderService = Depends(get_order_service),
):
    return await service.get_order(actor, order_id)


@router.get("/{order_id}/actions", response_model=OrderActions)
async def get_order_actions(
    order_id: str,
    actor: Actor = Depends(get_actor),
    service: OrderService = Depends(get_order_service),
):
    return await service.get_order_actions(actor, order_id)


@router.post("/{order_id}/status", response_model=Order)
async def change_status(
    order_id: str,
    change: StatusChange,
    actor: Actor = Depends(get_actor),
    service: OrderService = Depends(get_order_service),
):
    return await service.update_order_status(actor, order_id, change.status)


@router.post("/{order_id}/cancel", response_model=Order)
async def cancel_order(
    order_id: str,
    actor: Actor = Depends(get_actor),
    service: OrderService = Depends(get_order_service),
):
    return await service.cancel_order(actor, order_id)


@router.get("/{order_id}/reorder", response_model=ReorderDraft)
async def reorder(
    order_id: str,
    actor: Actor = Depends(get_actor),
    service: OrderService = Depends(get_order_service),
):
    return await service.reorder_draft(actor, order_id)
