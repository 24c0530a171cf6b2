import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from config import settings
from constants import DELIVERY_COMPANIES, PLACEHOLDER_TRACKING_PREFIX
from errors import ShippingIntegrationError, UnknownCarrierError
from schemas import DeliveryCompany, Order, OrderStatus, ShippingInfo, TrackingUpdate
from services.order_status import require_tracking_number

logger = logging.getLogger("packaging-store")

# Carrier-side statuses that move an order forward; anything else leaves it as is.
CARRIER_STATUS_MAP = {
    "delivered": OrderStatus.COMPLETED,
    "returned": OrderStatus.CANCELLED,
}


def get_delivery_companies() -> List[DeliveryCompany]:
    companies: List[DeliveryCompany] = []
    for raw in DELIVERY_COMPANIES:
        company = DeliveryCompany(**raw)
        if company.api is not None:
            api_key = settings.carrier_api_keys.get(company.id)
            company.api = company.api.model_copy(update={"api_key": api_key})
        companies.append(company)
    return companies


def lookup_company(carrier: str) -> Optional[DeliveryCompany]:
    """Find a carrier by id or display name."""
    for company in get_delivery_companies():
        if carrier in (company.id, company.name):
            return company
    return None


def find_company(carrier: str) -> DeliveryCompany:
    company = lookup_company(carrier)
    if company is None:
        raise UnknownCarrierError(carrier)
    return company


def placeholder_tracking_number() -> str:
    return f"{PLACEHOLDER_TRACKING_PREFIX}-{secrets.token_hex(4).upper()}"


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _shipment_payload(order: Order) -> Dict[str, Any]:
    return {
        "reference": order.id,
        "recipient": {
            "name": order.client_name,
            "phone": order.phone,
            "address": order.address,
            "wilaya": order.wilaya,
            "commune": order.commune,
        },
        "weight_grams": order.total_weight,
        "declared_value": order.total_price,
    }


class CarrierClient:
    """Thin JSON client for carriers that expose a shipment API."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.timeout = settings.shipping_timeout_seconds if timeout is None else timeout
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self._transport)

    @staticmethod
    def _headers(company: DeliveryCompany) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if company.api and company.api.api_key:
            headers["Authorization"] = f"Bearer {company.api.api_key}"
        return headers

    def create_shipment(self, order: Order, company: DeliveryCompany) -> str:
        if company.api is None:
            raise ShippingIntegrationError(company.name, "carrier has no API integration")
        try:
            with self._client() as client:
                response = client.post(
                    company.api.create_shipment_url,
                    json=_shipment_payload(order),
                    headers=self._headers(company),
                )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ShippingIntegrationError(company.name, str(exc)) from exc
        tracking_number = data.get("tracking_number") if isinstance(data, dict) else None
        if not tracking_number:
            raise ShippingIntegrationError(company.name, "response carried no tracking number")
        return str(tracking_number)

    def track_shipment(self, order: Order, company: DeliveryCompany) -> TrackingUpdate:
        if company.api is None:
            raise ShippingIntegrationError(company.name, "carrier has no API integration")
        tracking_number = order.shipping_info.tracking_number if order.shipping_info else ""
        try:
            with self._client() as client:
                response = client.get(
                    company.api.track_shipment_url,
                    params={"tracking_number": tracking_number},
                    headers=self._headers(company),
                )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ShippingIntegrationError(company.name, str(exc)) from exc
        if not isinstance(data, dict):
            data = {}
        carrier_status = str(data.get("status") or "").lower()
        return TrackingUpdate(
            status=CARRIER_STATUS_MAP.get(carrier_status, order.status),
            last_update=_parse_datetime(data.get("last_update")) or datetime.now(timezone.utc),
        )


def resolve_shipping_info(
    order: Order,
    company: DeliveryCompany,
    tracking_number: Optional[str],
    carrier_client: CarrierClient,
    allow_placeholder: Optional[bool] = None,
) -> ShippingInfo:
    """Work out the tracking number for handing ``order`` to ``company``.

    Manual carriers need an operator-entered number. Integrated carriers use
    one supplied by the operator if present, otherwise the carrier API is
    asked for one. When that call fails the error propagates unless
    placeholder tracking is enabled.
    """
    if company.requires_manual_tracking:
        value = require_tracking_number(company.name, tracking_number)
        return ShippingInfo(carrier=company.name, tracking_number=value)

    value = (tracking_number or "").strip()
    if value:
        return ShippingInfo(carrier=company.name, tracking_number=value)

    if allow_placeholder is None:
        allow_placeholder = settings.allow_placeholder_tracking
    try:
        value = carrier_client.create_shipment(order, company)
    except ShippingIntegrationError as exc:
        if not allow_placeholder:
            raise
        value = placeholder_tracking_number()
        logger.warning(
            "Shipment creation for order %s failed (%s); using placeholder tracking number %s",
            order.id,
            exc.reason,
            value,
        )
    return ShippingInfo(carrier=company.name, tracking_number=value)
