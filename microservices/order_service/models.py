"""
Order Service Data Models

Pydantic models for orders, their items and receipts, the status
lifecycle, and the request/response shapes of the order commands.

Wire field names are camelCase; attributes are snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel
from typing import Annotated, Any, Dict, FrozenSet, List, Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum

from .errors import RpcError


# Decimals go out as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class OrderStatus(str, Enum):
    """Order status enumeration"""
    PENDING = "PENDING"
    PAID = "PAID"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Legal status edges: PENDING -> PAID -> DELIVERED, CANCELLED from PENDING or PAID
ORDER_STATUS_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    """True when current -> new is a legal edge of the status lifecycle"""
    return new in ORDER_STATUS_TRANSITIONS[current]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Core Order Models

class Product(CamelModel):
    """Catalog product as returned by the product service"""
    id: str
    name: str
    price: Money

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        return str(v) if isinstance(v, int) else v


class OrderItem(CamelModel):
    """Order line; price is the catalog price frozen at creation"""
    product_id: str
    quantity: int
    price: Money
    name: Optional[str] = None


class OrderReceipt(CamelModel):
    """Receipt attached to an order once it is paid"""
    id: str
    order_id: str
    receipt_url: str
    created_at: datetime


class Order(CamelModel):
    """Core order model"""
    id: str
    total_amount: Money
    total_items: int
    status: OrderStatus = OrderStatus.PENDING
    paid: bool = False
    paid_at: Optional[datetime] = None
    external_charge_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    items: Optional[List[OrderItem]] = None
    receipt: Optional[OrderReceipt] = None


# Request Models

class RequestModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class OrderItemRequest(RequestModel):
    """Requested order line"""
    product_id: str = Field(..., min_length=1, description="Catalog product ID")
    quantity: int = Field(..., gt=0, description="Units ordered")

    @field_validator("product_id", mode="before")
    @classmethod
    def _coerce_product_id(cls, v):
        return str(v) if isinstance(v, int) else v


class CreateOrderRequest(RequestModel):
    """Create order request"""
    items: List[OrderItemRequest] = Field(..., min_length=1, description="Order lines")
    # Accepted for compatibility, never honored: new orders start PENDING
    status: Optional[OrderStatus] = Field(None, description="Ignored")

    @property
    def product_ids(self) -> List[str]:
        """Distinct product IDs in request order"""
        return list(dict.fromkeys(item.product_id for item in self.items))


class OrderPaginationRequest(RequestModel):
    """Paginated, optionally status-filtered listing"""
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    status: Optional[OrderStatus] = None


class FindOneRequest(RequestModel):
    """Single order lookup"""
    id: str = Field(..., min_length=1)


class ChangeOrderStatusRequest(RequestModel):
    """Status change request"""
    id: str = Field(..., min_length=1)
    status: OrderStatus


# Payment Integration Models

class PaymentSessionItem(CamelModel):
    """Line sent to the payment service"""
    name: str
    price: float
    quantity: int


class PaymentSessionRequest(CamelModel):
    """Request to the payment service"""
    order_id: str
    currency: str
    items: List[PaymentSessionItem]


# Response Models

class OrderResponse(BaseModel):
    """Order response model"""
    success: bool
    order: Optional[Order] = None
    message: str
    error: Optional[RpcError] = None


class PaginationMeta(CamelModel):
    """Pagination block of a listing"""
    page: int
    limit: int
    total_records: int
    last_page: int


class OrderListResponse(BaseModel):
    """Order list response"""
    success: bool
    data: List[Order] = []
    pagination: Optional[PaginationMeta] = None
    message: str = ""
    error: Optional[RpcError] = None


class PaymentSessionResponse(BaseModel):
    """Payment session response"""
    success: bool
    session: Optional[Dict[str, Any]] = None
    message: str
    error: Optional[RpcError] = None


class HealthResponse(BaseModel):
    """Service health reply"""
    success: bool
    status: str
    database: str
    timestamp: datetime
    message: str = ""
