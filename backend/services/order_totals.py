from dataclasses import dataclass
from typing import Sequence

from errors import EmptyOrderError
from schemas import Order, OrderLineItem


@dataclass(frozen=True)
class OrderTotals:
    total_price: float
    total_weight: float


def aggregate(line_items: Sequence[OrderLineItem], order_id: str | None = None) -> OrderTotals:
    if not line_items:
        raise EmptyOrderError(order_id)
    total_price = sum(item.unit_price * item.quantity for item in line_items)
    total_weight = sum(item.item_weight * item.quantity for item in line_items)
    return OrderTotals(total_price=total_price, total_weight=total_weight)


def apply_totals(order: Order) -> Order:
    """Recompute order totals from its line items and write them back."""
    totals = aggregate(order.line_items, order.id)
    order.total_price = totals.total_price
    order.total_weight = totals.total_weight
    return order


def replace_line_items(order: Order, line_items: Sequence[OrderLineItem]) -> Order:
    """Swap an order's line items, keeping totals in step.

    The order is left untouched when the new list is empty.
    """
    if not line_items:
        raise EmptyOrderError(order.id)
    order.line_items = list(line_items)
    return apply_totals(order)
