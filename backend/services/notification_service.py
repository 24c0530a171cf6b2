import logging
from typing import Optional, Protocol

from config import settings
from errors import NotificationDispatchError
from schemas import Order

logger = logging.getLogger("packaging-store")


class EmailSender(Protocol):
    def send(self, to: str, subject: str, body: str) -> None: ...


class LoggingEmailSender:
    """Writes outgoing mail to the log instead of delivering it."""

    def send(self, to: str, subject: str, body: str) -> None:
        if not to:
            raise NotificationDispatchError(to, "missing recipient address")
        logger.info("Email to=%s subject=%r\n%s", to, subject, body)


def _format_money(value: float) -> str:
    return f"${value:,.2f}"


class Notifier:
    """Best-effort buyer notifications.

    Every dispatch failure is logged and swallowed; callers get a bool back and
    never an exception, so a status change that already happened stays.
    """

    def __init__(
        self,
        sender: Optional[EmailSender] = None,
        store_name: Optional[str] = None,
        store_public_url: Optional[str] = None,
    ) -> None:
        self.sender = sender or LoggingEmailSender()
        self.store_name = store_name or settings.store_name
        self.store_public_url = (store_public_url or settings.store_public_url).rstrip("/")

    def tracking_link(self, order: Order) -> str:
        return f"{self.store_public_url}/#/track?id={order.id}"

    def _dispatch(self, order: Order, subject: str, body: str) -> bool:
        try:
            self.sender.send(order.email, subject, body)
        except Exception:
            logger.exception("Failed to send %r for order %s", subject, order.id)
            return False
        return True

    def send_order_confirmation(self, order: Order) -> bool:
        subject = f"{self.store_name} Order Confirmation #{order.id}"
        body = (
            f"Hi {order.client_name},\n\n"
            "Thank you for your order! We've received it and will start processing it shortly.\n\n"
            f"Order ID: {order.id}\n"
            f"Total Price: {_format_money(order.total_price)}\n\n"
            f"You can track your order status here: {self.tracking_link(order)}\n\n"
            f"Thanks,\nThe {self.store_name} Team\n"
        )
        return self._dispatch(order, subject, body)

    def shipment_body(self, order: Order) -> str:
        info = order.shipping_info
        if info is not None and info.tracking_number:
            tracking = f"Carrier: {info.carrier}\nTracking Number: {info.tracking_number}"
        else:
            tracking = "Tracking information will be updated shortly."
        return (
            f"Hi {order.client_name},\n\n"
            f"Great news! Your order #{order.id} has been shipped.\n\n"
            f"{tracking}\n\n"
            f"You can track your order status here: {self.tracking_link(order)}\n\n"
            f"Thanks,\nThe {self.store_name} Team\n"
        )

    def send_shipment_notification(self, order: Order) -> bool:
        subject = f"Your {self.store_name} Order #{order.id} Has Shipped!"
        try:
            body = self.shipment_body(order)
        except Exception:
            logger.exception("Could not build shipment email for order %s", order.id)
            return False
        return self._dispatch(order, subject, body)
