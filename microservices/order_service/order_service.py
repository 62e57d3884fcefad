"""
Order Service Business Logic

Order lifecycle orchestration: catalog validation and pricing, atomic
persistence, paginated queries, status transitions, payment sessions and
paid-notification reconciliation.

Every public operation returns a response model; failures are carried in
its `error` field instead of being raised to the caller.
"""

from typing import Optional, List, Dict
from datetime import datetime, timezone
from decimal import Decimal
import logging
import math

from .errors import (
    InvalidStatusTransitionError,
    OrderNotFoundError,
    OrderValidationError,
    InvalidProductReferenceError,
    translate_error,
)
from .events.models import PaidOrderEvent
from .models import (
    ChangeOrderStatusRequest, CreateOrderRequest, HealthResponse, Order, OrderItem,
    OrderListResponse, OrderPaginationRequest, OrderResponse, OrderStatus,
    PaginationMeta, PaymentSessionItem, PaymentSessionRequest,
    PaymentSessionResponse, Product, can_transition
)
from .protocols import OrderRepositoryProtocol, PaymentClientProtocol, ProductClientProtocol

logger = logging.getLogger(__name__)


class OrderService:
    """
    Order management business logic service

    Holds no state between calls; consistency is delegated to the
    repository's transactions.
    """

    def __init__(
        self,
        repository: OrderRepositoryProtocol,
        product_client: ProductClientProtocol,
        payment_client: PaymentClientProtocol,
        currency: str = "usd"
    ):
        """
        Initialize Order Service

        Args:
            repository: Order storage port
            product_client: Product catalog client
            payment_client: Payment service client
            currency: Currency sent with every payment session
        """
        self.repository = repository
        self.product_client = product_client
        self.payment_client = payment_client
        self.currency = currency

        logger.info("OrderService initialized")

    # Order Lifecycle Operations

    async def create_order(self, request: CreateOrderRequest) -> OrderResponse:
        """
        Create a new order

        Prices and totals come from the catalog snapshot, never from the
        request. The order and its items are written in one transaction.
        """
        try:
            catalog = await self._fetch_catalog(request.product_ids)

            missing = [pid for pid in request.product_ids if pid not in catalog]
            if missing:
                raise InvalidProductReferenceError(
                    f"Products not found: {', '.join(missing)}"
                )

            items = [
                OrderItem(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price=catalog[line.product_id].price
                )
                for line in request.items
            ]
            total_amount = sum((item.price * item.quantity for item in items), Decimal("0"))
            total_items = sum(item.quantity for item in items)

            if request.status and request.status != OrderStatus.PENDING:
                logger.debug(f"Ignoring requested status {request.status.value}; new orders start PENDING")

            order = await self.repository.create_order(
                total_amount=total_amount,
                total_items=total_items,
                items=items
            )

            logger.info(f"Order created: {order.id} ({total_items} items, total {total_amount})")

            return OrderResponse(
                success=True,
                order=self._with_product_names(order, catalog),
                message="Order created successfully"
            )

        except Exception as e:
            return self._order_failure(e, "create order")

    async def change_order_status(self, request: ChangeOrderStatusRequest) -> OrderResponse:
        """Move an order along the status lifecycle"""
        try:
            order = await self._require_order(request.id)

            if order.status == request.status:
                return OrderResponse(
                    success=True,
                    order=order,
                    message="Order status unchanged"
                )

            if not can_transition(order.status, request.status):
                raise InvalidStatusTransitionError(
                    f"Cannot change order status from {order.status.value} to {request.status.value}"
                )

            updated_order = await self.repository.update_status(request.id, request.status)

            logger.info(f"Order {request.id} status changed: {order.status.value} -> {request.status.value}")
            return OrderResponse(
                success=True,
                order=updated_order,
                message="Order status updated successfully"
            )

        except Exception as e:
            return self._order_failure(e, "change order status")

    async def mark_order_paid(self, event: PaidOrderEvent) -> OrderResponse:
        """
        Reconcile a paid notification from the payment service.

        Safe under redelivery: a second notification carrying the charge
        already recorded on the order is acknowledged without writing.
        """
        logger.info(f"Paid notification received: {event.model_dump()}")
        try:
            order = await self._require_order(event.order_id)

            if order.paid and order.external_charge_id == event.external_charge_id:
                logger.info(f"Order {order.id} already paid with charge {event.external_charge_id}, skipping")
                return OrderResponse(
                    success=True,
                    order=order,
                    message="Order already paid"
                )

            if not can_transition(order.status, OrderStatus.PAID):
                raise InvalidStatusTransitionError(
                    f"Order {order.id} cannot be marked paid from status {order.status.value}"
                )

            paid_order = await self.repository.record_payment(
                order_id=order.id,
                external_charge_id=event.external_charge_id,
                receipt_url=event.receipt_url,
                paid_at=datetime.now(timezone.utc)
            )

            logger.info(f"Order {paid_order.id} marked as paid (charge {event.external_charge_id})")
            return OrderResponse(
                success=True,
                order=paid_order,
                message="Order marked as paid"
            )

        except Exception as e:
            return self._order_failure(e, "mark order paid")

    # Order Query Operations

    async def get_order(self, order_id: str) -> OrderResponse:
        """Get order by ID with current catalog names joined onto its items"""
        try:
            order = await self._require_order(order_id)

            product_ids = list(dict.fromkeys(item.product_id for item in order.items or []))
            catalog = await self._fetch_catalog(product_ids) if product_ids else {}

            return OrderResponse(
                success=True,
                order=self._with_product_names(order, catalog),
                message="Order retrieved successfully"
            )

        except Exception as e:
            return self._order_failure(e, "get order")

    async def list_orders(self, request: OrderPaginationRequest) -> OrderListResponse:
        """List orders page by page, optionally filtered by status"""
        try:
            total_records = await self.repository.count_orders(status=request.status)
            last_page = math.ceil(total_records / request.limit)

            orders = await self.repository.list_orders(
                limit=request.limit,
                offset=(request.page - 1) * request.limit,
                status=request.status
            )

            return OrderListResponse(
                success=True,
                data=orders,
                pagination=PaginationMeta(
                    page=request.page,
                    limit=request.limit,
                    total_records=total_records,
                    last_page=last_page
                )
            )

        except Exception as e:
            error = translate_error(e, "list orders")
            return OrderListResponse(success=False, message=error.message, error=error)

    # Service Integration Methods

    async def create_payment_session(self, order: Order) -> PaymentSessionResponse:
        """Open a payment session for an order with the payment service"""
        try:
            items = [
                PaymentSessionItem(
                    name=item.name or item.product_id,
                    price=float(item.price),
                    quantity=item.quantity
                )
                for item in order.items or []
            ]
            if not items:
                raise OrderValidationError(f"Order {order.id} has no items to pay for")

            session = await self.payment_client.create_payment_session(
                PaymentSessionRequest(order_id=order.id, currency=self.currency, items=items)
            )

            logger.info(f"Payment session created for order {order.id}")
            return PaymentSessionResponse(
                success=True,
                session=session,
                message="Payment session created successfully"
            )

        except Exception as e:
            error = translate_error(e, "create payment session")
            return PaymentSessionResponse(success=False, message=error.message, error=error)

    # Service Operations

    async def health_check(self) -> HealthResponse:
        """Health check for the service"""
        try:
            healthy = await self.repository.health_check()
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            healthy = False

        return HealthResponse(
            success=healthy,
            status="healthy" if healthy else "unhealthy",
            database="connected" if healthy else "disconnected",
            timestamp=datetime.now(timezone.utc),
            message="Service is healthy" if healthy else "Database unavailable"
        )

    # Private Helper Methods

    async def _require_order(self, order_id: str) -> Order:
        order = await self.repository.get_order(order_id)
        if not order:
            raise OrderNotFoundError(f"Order with id #{order_id} not found")
        return order

    async def _fetch_catalog(self, product_ids: List[str]) -> Dict[str, Product]:
        """Resolve product IDs against the catalog, keyed by ID"""
        products = await self.product_client.validate_products(product_ids)
        return {product.id: product for product in products}

    def _with_product_names(self, order: Order, catalog: Dict[str, Product]) -> Order:
        """Copy of the order with display names joined onto its items"""
        items = []
        for item in order.items or []:
            product: Optional[Product] = catalog.get(item.product_id)
            if product is None:
                logger.warning(f"Product {item.product_id} of order {order.id} missing from catalog")
            items.append(item.model_copy(update={"name": product.name if product else None}))
        return order.model_copy(update={"items": items})

    def _order_failure(self, error: Exception, operation: str) -> OrderResponse:
        rpc_error = translate_error(error, operation)
        return OrderResponse(success=False, message=rpc_error.message, error=rpc_error)
