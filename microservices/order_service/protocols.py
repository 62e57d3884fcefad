"""
Order Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable
from datetime import datetime
from decimal import Decimal

# Import only models (no I/O dependencies)
from .models import Order, OrderItem, OrderStatus, PaymentSessionRequest, Product


# ============================================================================
# Repository Protocol
# ============================================================================

@runtime_checkable
class OrderRepositoryProtocol(Protocol):
    """
    Interface for Order Repository.

    Implementations must provide these methods.
    Used for dependency injection to enable testing.

    Writes raise RecordNotFoundError when the target order is missing and
    StoreWriteError on any other write failure.
    """

    async def create_order(
        self,
        total_amount: Decimal,
        total_items: int,
        items: List[OrderItem]
    ) -> Order:
        """Persist an order with all its items in one transaction"""
        ...

    async def get_order(self, order_id: str) -> Optional[Order]:
        """Get order by ID, items and receipt included"""
        ...

    async def count_orders(self, status: Optional[OrderStatus] = None) -> int:
        """Count orders, optionally restricted to one status"""
        ...

    async def list_orders(
        self,
        limit: int,
        offset: int,
        status: Optional[OrderStatus] = None
    ) -> List[Order]:
        """List orders in insertion order, without items"""
        ...

    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        """Overwrite the order status"""
        ...

    async def record_payment(
        self,
        order_id: str,
        external_charge_id: str,
        receipt_url: str,
        paid_at: datetime
    ) -> Order:
        """
        Mark the order PAID and attach its receipt in one transaction.

        Re-checks the stored state under a row lock: the same charge is a
        no-op, a different charge or a non-payable status raises
        InvalidStatusTransitionError.
        """
        ...

    async def health_check(self) -> bool:
        """True when the store answers"""
        ...


# ============================================================================
# Client Protocols
# ============================================================================

@runtime_checkable
class ProductClientProtocol(Protocol):
    """Interface for the product catalog"""

    async def validate_products(self, ids: List[str]) -> List[Product]:
        """
        Resolve product IDs against the catalog.

        May return a subset; raises DependencyUnavailableError when the
        catalog cannot be reached.
        """
        ...


@runtime_checkable
class PaymentClientProtocol(Protocol):
    """Interface for Payment Service Client"""

    async def create_payment_session(
        self,
        request: PaymentSessionRequest
    ) -> Dict[str, Any]:
        """Open a payment session and return the gateway's session handle"""
        ...
