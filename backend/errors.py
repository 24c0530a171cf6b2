"""Exceptions raised by the storefront services."""


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    pass


class QuoteRequiredError(StorefrontError):
    """Raised when a cart item is requested for dimensions missing from the catalog."""

    def __init__(self, product_type: str, width: float, height: float, depth: float):
        self.product_type = product_type
        self.dimensions = (width, height, depth)
        super().__init__(
            f"No catalog size {width}x{height}x{depth} for {product_type}; manual quote required"
        )


class EmptyOrderError(StorefrontError):
    """Raised when an order would be saved with no line items."""

    def __init__(self, order_id: str | None = None):
        self.order_id = order_id
        msg = "An order must contain at least one line item"
        if order_id:
            msg = f"Order {order_id} must contain at least one line item"
        super().__init__(msg)


class OrderNotFoundError(StorefrontError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class UnknownCarrierError(StorefrontError):
    def __init__(self, carrier: str):
        self.carrier = carrier
        super().__init__(f"Unknown delivery company: {carrier}")


class MissingTrackingNumberError(StorefrontError):
    """Raised when a manual-tracking carrier is selected without a tracking number."""

    def __init__(self, carrier: str):
        self.carrier = carrier
        super().__init__(f"Tracking number is required for {carrier}")


class ShippingIntegrationError(StorefrontError):
    """Raised when a carrier API call fails. The order keeps its prior status."""

    def __init__(self, carrier: str, reason: str):
        self.carrier = carrier
        self.reason = reason
        super().__init__(f"Shipment creation with {carrier} failed: {reason}")


class TrackingUnavailableError(StorefrontError):
    def __init__(self, order_id: str, reason: str):
        self.order_id = order_id
        self.reason = reason
        super().__init__(f"Cannot track order {order_id}: {reason}")


class NotificationDispatchError(StorefrontError):
    """Raised by email senders. Always caught at the notifier boundary."""

    def __init__(self, recipient: str, reason: str):
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"Failed to notify {recipient or '<no email>'}: {reason}")
