"""
Role specific views over a set of orders. Pure filter + sort, no I/O.

Sorting is stable: orders with equal `created_at` keep the order the store
delivered them in.
"""
from __future__ import annotations

from enum import Enum
from typing import Iterable, List

from homecook.models.order import Order


class OrderPartition(str, Enum):
    ACTIVE = "active"
    ALL = "all"
    HISTORY = "history"


def newest_first(orders: Iterable[Order]) -> List[Order]:
    # sorted() stays stable with reverse=True
    return sorted(orders, key=lambda o: o.created_at, reverse=True)


def customer_order_list(orders: Iterable[Order]) -> List[Order]:
    return newest_first(orders)


def partition_cook_orders(orders: Iterable[Order], partition: OrderPartition) -> List[Order]:
    partition = OrderPartition(partition)
    if partition == OrderPartition.ACTIVE:
        selected = [o for o in orders if not o.is_terminal]
    elif partition == OrderPartition.HISTORY:
        selected = [o for o in orders if o.is_terminal]
    else:
        selected = list(orders)
    return newest_first(selected)
