from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OrderStatus(str, Enum):
    PENDING = "Pending"
    DESIGNING = "Designing"
    PRINTING = "Printing"
    IN_PRODUCTION = "In Production"
    SHIPPED = "Shipped"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class PriceTier(BaseModel):
    min_quantity: int = Field(..., ge=0, description="Smallest quantity the tier applies to")
    price: float = Field(..., ge=0, description="Unit price once min_quantity is reached")


class ProductSize(BaseModel):
    id: str
    width: float
    height: float
    depth: Optional[float] = None
    weight: float = Field(..., ge=0, description="Unit weight in grams")
    pricing: List[PriceTier] = Field(..., min_length=1)


class ProductColor(BaseModel):
    name: str
    value: str


class Product(BaseModel):
    id: str = Field(..., description="Product type, e.g. cartonBox")
    name: str
    available_colors: List[ProductColor] = []


class SocialLink(BaseModel):
    platform: str
    url: str


class Socials(BaseModel):
    facebook: str = ""
    instagram: str = ""
    tiktok: str = ""
    whatsapp: str = ""
    viber: str = ""
    others: List[SocialLink] = []


class LogoProperties(BaseModel):
    x: float = 50
    y: float = 50
    scale: float = 1
    rotation: float = 0


class ClientDetails(BaseModel):
    client_name: str
    phone: str
    email: str = ""
    address: str = ""
    wilaya: str = ""
    commune: str = ""
    socials: Socials = Field(default_factory=Socials)


class CustomizationDetails(ClientDetails):
    product_type: str
    product_name: str = ""
    width: float
    height: float
    depth: float = 0
    quantity: int = Field(..., ge=1)
    color: str = ""
    logo_url: Optional[str] = None
    logo_props: LogoProperties = Field(default_factory=LogoProperties)
    description: str = ""


class CartItem(CustomizationDetails):
    cart_item_id: str
    unit_price: float = Field(..., ge=0)
    item_weight: float = Field(..., ge=0)


class OrderLineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_type: str
    product_name: str = ""
    width: float
    height: float
    depth: float = 0
    quantity: int = Field(..., ge=1)
    color: str = ""
    description: str = ""
    logo_url: Optional[str] = None
    logo_props: LogoProperties = Field(default_factory=LogoProperties)
    unit_price: float = Field(..., ge=0)
    item_weight: float = Field(..., ge=0)


class ShippingInfo(BaseModel):
    carrier: str
    tracking_number: str = ""
    shipped_at: Optional[datetime] = None
    last_update: Optional[datetime] = None


class Order(ClientDetails):
    id: str
    submitted_at: datetime
    line_items: List[OrderLineItem]
    total_price: float
    total_weight: float
    status: OrderStatus = OrderStatus.PENDING
    shipping_info: Optional[ShippingInfo] = None
    user_id: Optional[str] = None


class PriceQuote(BaseModel):
    price_per_item: Optional[float]
    total_price: Optional[float]
    item_weight: Optional[float]
    discount_applied: bool
    is_custom_size: bool


class CarrierApi(BaseModel):
    create_shipment_url: str
    track_shipment_url: str
    api_key: Optional[str] = None


class DeliveryCompany(BaseModel):
    id: str
    name: str
    api: Optional[CarrierApi] = None

    @property
    def requires_manual_tracking(self) -> bool:
        return self.api is None


class DeliveryCompanyResponse(BaseModel):
    id: str
    name: str
    requires_manual_tracking: bool


class TrackingUpdate(BaseModel):
    status: OrderStatus
    last_update: datetime


class PriceQuoteRequest(BaseModel):
    product_type: str
    width: float
    height: float
    depth: float = 0
    quantity: int = Field(..., ge=1)


class CreateOrderRequest(BaseModel):
    client_details: ClientDetails
    cart_items: List[CartItem]
    user_id: Optional[str] = None


class OrderStatusUpdateRequest(BaseModel):
    status: OrderStatus
    shipping_info: Optional[ShippingInfo] = None


class ShipOrderRequest(BaseModel):
    carrier_id: str
    tracking_number: Optional[str] = None


class BulkStatusUpdateRequest(BaseModel):
    order_ids: List[str]
    status: OrderStatus


class LineItemsUpdateRequest(BaseModel):
    line_items: List[OrderLineItem]


class OrderListResponse(BaseModel):
    items: List[Order]


class OrderTimeline(BaseModel):
    order_id: str
    status: OrderStatus
    # -1 when the status sits outside the timeline (Cancelled).
    position: int
    steps: List[OrderStatus]
    closed: bool


class BulkUpdateResult(BaseModel):
    updated: List[str] = []
    missing: List[str] = []
    failed: List[str] = []
    notified: List[str] = []
