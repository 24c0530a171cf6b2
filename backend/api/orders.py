import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from dependencies import get_order_service
from errors import (
    EmptyOrderError,
    MissingTrackingNumberError,
    OrderNotFoundError,
    ShippingIntegrationError,
    StorefrontError,
    TrackingUnavailableError,
    UnknownCarrierError,
)
from schemas import (
    BulkStatusUpdateRequest,
    CreateOrderRequest,
    LineItemsUpdateRequest,
    Order,
    OrderListResponse,
    OrderStatusUpdateRequest,
    OrderTimeline,
    ShipOrderRequest,
)
from services.orders_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])

ERROR_STATUS = {
    EmptyOrderError: status.HTTP_400_BAD_REQUEST,
    MissingTrackingNumberError: status.HTTP_400_BAD_REQUEST,
    OrderNotFoundError: status.HTTP_404_NOT_FOUND,
    UnknownCarrierError: status.HTTP_404_NOT_FOUND,
    TrackingUnavailableError: status.HTTP_409_CONFLICT,
    ShippingIntegrationError: status.HTTP_502_BAD_GATEWAY,
}


def _http_error(exc: StorefrontError) -> HTTPException:
    code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=code, detail=str(exc))


@router.post("", response_model=Order, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: CreateOrderRequest,
    service: OrderService = Depends(get_order_service),
) -> Order:
    try:
        return await asyncio.to_thread(
            service.create_order, payload.client_details, payload.cart_items, payload.user_id
        )
    except StorefrontError as exc:
        raise _http_error(exc) from exc


@router.get("", response_model=OrderListResponse)
async def list_orders(
    user_id: Optional[str] = None,
    service: OrderService = Depends(get_order_service),
) -> OrderListResponse:
    items = await asyncio.to_thread(service.list_orders, user_id)
    return OrderListResponse(items=items)


@router.post("/bulk-status", status_code=status.HTTP_204_NO_CONTENT)
async def bulk_update_status(
    payload: BulkStatusUpdateRequest,
    service: OrderService = Depends(get_order_service),
) -> Response:
    await asyncio.to_thread(service.bulk_update_order_status, payload.order_ids, payload.status)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{order_id}", response_model=Order)
async def read_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
) -> Order:
    try:
        return await asyncio.to_thread(service.get_order, order_id)
    except StorefrontError as exc:
        raise _http_error(exc) from exc


@router.get("/{order_id}/timeline", response_model=OrderTimeline)
async def read_timeline(
    order_id: str,
    service: OrderService = Depends(get_order_service),
) -> OrderTimeline:
    try:
        return await asyncio.to_thread(service.get_timeline, order_id)
    except StorefrontError as exc:
        raise _http_error(exc) from exc


@router.put("/{order_id}/line-items", response_model=Order)
async def replace_line_items(
    order_id: str,
    payload: LineItemsUpdateRequest,
    service: OrderService = Depends(get_order_service),
) -> Order:
    try:
        return await asyncio.to_thread(service.update_line_items, order_id, payload.line_items)
    except StorefrontError as exc:
        raise _http_error(exc) from exc


@router.patch("/{order_id}/status", response_model=Order)
async def update_status(
    order_id: str,
    payload: OrderStatusUpdateRequest,
    service: OrderService = Depends(get_order_service),
) -> Order:
    try:
        return await asyncio.to_thread(
            service.update_order_status, order_id, payload.status, payload.shipping_info
        )
    except StorefrontError as exc:
        raise _http_error(exc) from exc


@router.post("/{order_id}/ship", response_model=Order)
async def ship_order(
    order_id: str,
    payload: ShipOrderRequest,
    service: OrderService = Depends(get_order_service),
) -> Order:
    try:
        return await asyncio.to_thread(
            service.ship_order, order_id, payload.carrier_id, payload.tracking_number
        )
    except StorefrontError as exc:
        raise _http_error(exc) from exc


@router.post("/{order_id}/tracking/refresh", response_model=Order)
async def refresh_tracking(
    order_id: str,
    service: OrderService = Depends(get_order_service),
) -> Order:
    try:
        return await asyncio.to_thread(service.refresh_tracking, order_id)
    except StorefrontError as exc:
        raise _http_error(exc) from exc
