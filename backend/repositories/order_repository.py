import threading
from typing import Any, Dict, List, Optional, Protocol

from errors import EmptyOrderError, OrderNotFoundError
from schemas import Order

ORDERS_TABLE = "orders"


class OrderRepository(Protocol):
    def get(self, order_id: str) -> Optional[Order]: ...

    def list(self, user_id: Optional[str] = None) -> List[Order]: ...

    def add(self, order: Order) -> Order: ...

    def save(self, order: Order) -> Order: ...


def _ensure_line_items(order: Order) -> None:
    if not order.line_items:
        raise EmptyOrderError(order.id)


class InMemoryOrderRepository:
    """Dict-backed store. Reads and writes copy so callers never share state."""

    def __init__(self) -> None:
        self._orders: Dict[str, Order] = {}
        self._lock = threading.Lock()

    def get(self, order_id: str) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            return order.model_copy(deep=True) if order else None

    def list(self, user_id: Optional[str] = None) -> List[Order]:
        with self._lock:
            orders = [
                order.model_copy(deep=True)
                for order in self._orders.values()
                if user_id is None or order.user_id == user_id
            ]
        return sorted(orders, key=lambda order: order.submitted_at, reverse=True)

    def add(self, order: Order) -> Order:
        _ensure_line_items(order)
        with self._lock:
            self._orders[order.id] = order.model_copy(deep=True)
        return order

    def save(self, order: Order) -> Order:
        _ensure_line_items(order)
        with self._lock:
            if order.id not in self._orders:
                raise OrderNotFoundError(order.id)
            self._orders[order.id] = order.model_copy(deep=True)
        return order


class SupabaseOrderRepository:
    def __init__(self, client: Any = None) -> None:
        if client is None:
            from supabase_client import get_supabase

            client = get_supabase()
        self._client = client

    @staticmethod
    def _to_record(order: Order) -> Dict[str, Any]:
        return order.model_dump(mode="json")

    def get(self, order_id: str) -> Optional[Order]:
        response = (
            self._client.table(ORDERS_TABLE)
            .select("*")
            .eq("id", order_id)
            .limit(1)
            .execute()
        )
        items = response.data or []
        return Order.model_validate(items[0]) if items else None

    def list(self, user_id: Optional[str] = None) -> List[Order]:
        query = self._client.table(ORDERS_TABLE).select("*")
        if user_id is not None:
            query = query.eq("user_id", user_id)
        response = query.order("submitted_at", desc=True).execute()
        return [Order.model_validate(row) for row in response.data or []]

    def add(self, order: Order) -> Order:
        _ensure_line_items(order)
        response = self._client.table(ORDERS_TABLE).insert(self._to_record(order)).execute()
        if not response.data:
            raise RuntimeError(f"Failed to store order {order.id}")
        return order

    def save(self, order: Order) -> Order:
        _ensure_line_items(order)
        record = self._to_record(order)
        record.pop("id")
        response = (
            self._client.table(ORDERS_TABLE).update(record).eq("id", order.id).execute()
        )
        if not response.data:
            raise OrderNotFoundError(order.id)
        return order
