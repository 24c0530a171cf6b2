import logging
import secrets
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from config import settings
from constants import ORDER_ID_RANDOM_BYTES
from errors import EmptyOrderError, OrderNotFoundError, TrackingUnavailableError
from repositories.order_repository import OrderRepository
from schemas import (
    BulkUpdateResult,
    CartItem,
    ClientDetails,
    Order,
    OrderLineItem,
    OrderStatus,
    OrderTimeline,
    ShippingInfo,
)
from services.line_items import build_line_items
from services.notification_service import Notifier
from services.order_status import (
    STATUS_TIMELINE,
    is_terminal,
    require_tracking_number,
    timeline_position,
    transition,
)
from services.order_totals import aggregate, replace_line_items
from services.shipping_service import (
    CarrierClient,
    find_company,
    lookup_company,
    resolve_shipping_info,
)

logger = logging.getLogger("packaging-store")


class OrderService:
    def __init__(
        self,
        repository: OrderRepository,
        notifier: Optional[Notifier] = None,
        carrier_client: Optional[CarrierClient] = None,
        order_id_prefix: Optional[str] = None,
        allow_placeholder_tracking: Optional[bool] = None,
    ) -> None:
        self.repository = repository
        self.notifier = notifier or Notifier()
        self.carrier_client = carrier_client or CarrierClient()
        self.order_id_prefix = order_id_prefix or settings.order_id_prefix
        self.allow_placeholder_tracking = allow_placeholder_tracking

    def _new_order_id(self) -> str:
        while True:
            order_id = f"{self.order_id_prefix}-{secrets.token_hex(ORDER_ID_RANDOM_BYTES).upper()}"
            if self.repository.get(order_id) is None:
                return order_id

    def get_order(self, order_id: str) -> Order:
        order = self.repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def get_timeline(self, order_id: str) -> OrderTimeline:
        order = self.get_order(order_id)
        return OrderTimeline(
            order_id=order.id,
            status=order.status,
            position=timeline_position(order.status),
            steps=list(STATUS_TIMELINE),
            closed=is_terminal(order.status),
        )

    def list_orders(self, user_id: Optional[str] = None) -> List[Order]:
        return self.repository.list(user_id)

    def create_order(
        self,
        client_details: ClientDetails,
        cart_items: Sequence[CartItem],
        user_id: Optional[str] = None,
    ) -> Order:
        if not cart_items:
            raise EmptyOrderError()
        line_items = build_line_items(cart_items)
        totals = aggregate(line_items)
        order = Order(
            **client_details.model_dump(),
            id=self._new_order_id(),
            submitted_at=datetime.now(timezone.utc),
            line_items=line_items,
            total_price=totals.total_price,
            total_weight=totals.total_weight,
            status=OrderStatus.PENDING,
            user_id=user_id,
        )
        self.repository.add(order)
        logger.info(
            "Created order %s with %d line item(s), total %.2f",
            order.id,
            len(line_items),
            order.total_price,
        )
        self.notifier.send_order_confirmation(order)
        return order

    def update_line_items(self, order_id: str, line_items: Sequence[OrderLineItem]) -> Order:
        order = self.get_order(order_id)
        replace_line_items(order, line_items)
        self.repository.save(order)
        logger.info(
            "Order %s line items replaced (%d), total %.2f",
            order.id,
            len(order.line_items),
            order.total_price,
        )
        return order

    def _with_tracking_number(self, order: Order, shipping_info: ShippingInfo) -> ShippingInfo:
        # Integrated carriers are asked for a number when none was entered.
        company = lookup_company(shipping_info.carrier)
        if company is not None and not company.requires_manual_tracking:
            if not shipping_info.tracking_number.strip():
                resolved = resolve_shipping_info(
                    order,
                    company,
                    None,
                    self.carrier_client,
                    allow_placeholder=self.allow_placeholder_tracking,
                )
                return shipping_info.model_copy(
                    update={"tracking_number": resolved.tracking_number}
                )
        tracking_number = require_tracking_number(
            shipping_info.carrier, shipping_info.tracking_number
        )
        return shipping_info.model_copy(update={"tracking_number": tracking_number})

    def update_order_status(
        self,
        order_id: str,
        new_status: OrderStatus,
        shipping_info: Optional[ShippingInfo] = None,
    ) -> Order:
        order = self.get_order(order_id)
        if new_status == OrderStatus.SHIPPED and shipping_info is not None:
            shipping_info = self._with_tracking_number(order, shipping_info)
        change = transition(order, new_status, shipping_info)
        self.repository.save(order)
        logger.info(
            "Order %s status %s -> %s", order.id, change.previous.value, change.current.value
        )
        if change.notify_shipped:
            self.notifier.send_shipment_notification(order)
        return order

    def bulk_update_order_status(
        self, order_ids: Iterable[str], new_status: OrderStatus
    ) -> BulkUpdateResult:
        result = BulkUpdateResult()
        for order_id in dict.fromkeys(order_ids):
            order = self.repository.get(order_id)
            if order is None:
                logger.warning("Bulk status update skipped unknown order %s", order_id)
                result.missing.append(order_id)
                continue
            try:
                change = transition(order, new_status)
                self.repository.save(order)
            except Exception:
                logger.exception("Bulk status update failed for order %s", order_id)
                result.failed.append(order_id)
                continue
            result.updated.append(order_id)
            if change.entered_shipped and self.notifier.send_shipment_notification(order):
                result.notified.append(order_id)
        logger.info(
            "Bulk status update to %s: %d updated, %d missing, %d failed",
            new_status.value,
            len(result.updated),
            len(result.missing),
            len(result.failed),
        )
        return result

    def ship_order(
        self, order_id: str, carrier: str, tracking_number: Optional[str] = None
    ) -> Order:
        """Hand an order to a carrier and mark it Shipped.

        The status only changes once a tracking number is in hand; a failed
        carrier call leaves the order as it was.
        """
        order = self.get_order(order_id)
        company = find_company(carrier)
        shipping_info = resolve_shipping_info(
            order,
            company,
            tracking_number,
            self.carrier_client,
            allow_placeholder=self.allow_placeholder_tracking,
        )
        return self.update_order_status(order_id, OrderStatus.SHIPPED, shipping_info)

    def refresh_tracking(self, order_id: str) -> Order:
        order = self.get_order(order_id)
        info = order.shipping_info
        if is_terminal(order.status):
            raise TrackingUnavailableError(order_id, f"order is {order.status.value}")
        if info is None or not info.tracking_number:
            raise TrackingUnavailableError(order_id, "order has no tracking number")
        company = lookup_company(info.carrier)
        if company is None or company.requires_manual_tracking:
            raise TrackingUnavailableError(order_id, "carrier does not support API tracking")
        update = self.carrier_client.track_shipment(order, company)
        refreshed = info.model_copy(update={"last_update": update.last_update})
        change = transition(order, update.status, refreshed)
        self.repository.save(order)
        logger.info(
            "Order %s tracking refreshed: %s -> %s",
            order.id,
            change.previous.value,
            change.current.value,
        )
        if change.notify_shipped:
            self.notifier.send_shipment_notification(order)
        return order
