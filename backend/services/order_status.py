from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from errors import MissingTrackingNumberError
from schemas import Order, OrderStatus, ShippingInfo

# Display order for the progress timeline. Cancelled sits outside it.
STATUS_TIMELINE = (
    OrderStatus.PENDING,
    OrderStatus.DESIGNING,
    OrderStatus.PRINTING,
    OrderStatus.IN_PRODUCTION,
    OrderStatus.SHIPPED,
    OrderStatus.COMPLETED,
)
TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})


@dataclass(frozen=True)
class StatusTransition:
    order_id: str
    previous: OrderStatus
    current: OrderStatus
    entered_shipped: bool
    notify_shipped: bool


def timeline_position(status: OrderStatus) -> int:
    try:
        return STATUS_TIMELINE.index(status)
    except ValueError:
        return -1


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def require_tracking_number(carrier: str, tracking_number: Optional[str]) -> str:
    value = (tracking_number or "").strip()
    if not value:
        raise MissingTrackingNumberError(carrier)
    return value


def transition(
    order: Order,
    new_status: OrderStatus,
    shipping_info: Optional[ShippingInfo] = None,
) -> StatusTransition:
    """Apply ``new_status`` to ``order`` in place.

    Any status may follow any other; the admin picks freely. Entering Shipped
    from a different status is flagged so the caller can notify the buyer
    exactly once, and only when shipping details are on the order.
    """
    previous = order.status
    if shipping_info is not None:
        if new_status == OrderStatus.SHIPPED and shipping_info.shipped_at is None:
            shipping_info = shipping_info.model_copy(
                update={"shipped_at": datetime.now(timezone.utc)}
            )
        order.shipping_info = shipping_info
    order.status = new_status
    entered_shipped = new_status == OrderStatus.SHIPPED and previous != OrderStatus.SHIPPED
    return StatusTransition(
        order_id=order.id,
        previous=previous,
        current=new_status,
        entered_shipped=entered_shipped,
        notify_shipped=entered_shipped and order.shipping_info is not None,
    )
