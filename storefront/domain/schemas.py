# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from datetime import datetime
from enum import Enum


class DeliveryOption(str, Enum):
    PICKUP = "pickup"
    KIGALI = "kigali"
    UPCOUNTRY = "upcountry"


class ProductIn(BaseModel):
    """Product as it is added to the cart from the catalog."""

    id: int = Field(..., gt=0, description="Product id")
    name: str = Field(..., min_length=1)
    price: int = Field(..., ge=0, description="Unit price in whole RWF")
    image: str | None = None


class QuantityIn(BaseModel):
    quantity: int


class CartItem(BaseModel):
    """Line in the cart; quantity is never stored below 1."""

    id: int
    name: str
    price: int
    image: str | None = None
    quantity: int = Field(1, ge=1)


class CartOut(BaseModel):
    items: List[CartItem]
    total: int
    count: int


class CheckoutDraft(BaseModel):
    """Checkout inputs held by the client before they become a server order."""

    customer_name: str | None = None
    customer_phone: str = ""
    delivery_option: DeliveryOption = DeliveryOption.PICKUP
    delivery_location: str | None = None


class OrderItemPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(..., alias="productId")
    quantity: int
    unit_price: int = Field(..., alias="unitPrice")


class OrderPayload(BaseModel):
    """Body of the order beacon, camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    customer_name: str | None = Field(None, alias="customerName")
    customer_phone: str = Field(..., alias="customerPhone")
    channel: str = "whatsapp"
    subtotal: int
    delivery_option: DeliveryOption = Field(..., alias="deliveryOption")
    delivery_fee: int = Field(..., alias="deliveryFee")
    delivery_location: str | None = Field(None, alias="deliveryLocation")
    items: List[OrderItemPayload]


class CheckoutQuote(BaseModel):
    subtotal: int
    delivery_fee: int
    grand_total: int
    can_submit: bool


class CheckoutResult(BaseModel):
    handoff_url: str
    message: str
    grand_total: int


class TrackingInfo(BaseModel):
    """Tracking response of /orders/{id}/track and /orders/track."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status: str | None = None
    order_id: int | None = Field(None, alias="orderId")
    order_number: int | str | None = Field(None, alias="orderNumber")
    tracking_number: str | None = Field(None, alias="trackingNumber")
    created_at: datetime | None = Field(None, alias="createdAt")
    shipped_at: datetime | None = Field(None, alias="shippedAt")
    delivered_at: datetime | None = Field(None, alias="deliveredAt")


class TrackByNumberIn(BaseModel):
    order_number: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)


class OrderRecordItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product_id: int | None = Field(None, alias="productId")
    quantity: int = 0
    unit_price: int = Field(0, alias="unitPrice")


class OrderRecord(BaseModel):
    """Server order as listed in /orders/my-orders (snake_case on the wire)."""

    model_config = ConfigDict(extra="ignore")

    id: int
    order_number: int | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    status: str = "PENDING"
    subtotal: int | None = 0
    delivery_option: str | None = None
    delivery_fee: int | None = 0
    delivery_location: str | None = None
    tracking_number: str | None = None
    created_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    items: List[OrderRecordItem] = []

    @property
    def total(self) -> int:
        return (self.subtotal or 0) + (self.delivery_fee or 0)


class TrackingStepOut(BaseModel):
    key: str
    label: str
    completed: bool


class TrackingOut(BaseModel):
    """Tracker view as served to the storefront UI."""

    found: bool
    status: str | None = None
    order_number: int | str | None = None
    tracking_number: str | None = None
    cancelled: bool = False
    steps: List[TrackingStepOut] = []
    created_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    last_updated: datetime | None = None
    message: str | None = None


class OrderHistoryOut(BaseModel):
    orders: List[OrderRecord]
    display_numbers: dict[int, int]
    total_spent: int
