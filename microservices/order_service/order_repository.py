"""
Order Repository

Data access layer for orders, their items and receipts using asyncpg.
Schema: migrations/001_create_order_tables.sql
"""

from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
import uuid
import logging
from decimal import Decimal

import asyncpg

from core.postgres_client import PostgresClient
from .errors import InvalidStatusTransitionError, RecordNotFoundError, StoreWriteError
from .models import Order, OrderItem, OrderReceipt, OrderStatus, can_transition

logger = logging.getLogger(__name__)


class OrderRepository:
    """
    Repository for order data operations

    Multi-row writes run inside a single transaction so a partially
    written order is never visible.
    """

    def __init__(self, db: PostgresClient):
        """Initialize Order Repository with a connected PostgresClient"""
        self.db = db

        self.schema = "orders"  # Using "orders" instead of "order" (reserved keyword)
        self.orders_table = f'"{self.schema}".orders'
        self.items_table = f'"{self.schema}".order_items'
        self.receipts_table = f'"{self.schema}".order_receipts'

        logger.info("OrderRepository initialized")

    async def create_order(
        self,
        total_amount: Decimal,
        total_items: int,
        items: List[OrderItem]
    ) -> Order:
        """Create an order and all of its items atomically"""
        order_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc)

        try:
            async with self.db.transaction() as conn:
                row = await conn.fetchrow(
                    f'''
                    INSERT INTO {self.orders_table}
                        (id, total_amount, total_items, status, paid, created_at, updated_at)
                    VALUES ($1, $2, $3, $4, FALSE, $5, $5)
                    RETURNING *
                    ''',
                    order_id, total_amount, total_items, OrderStatus.PENDING.value, now
                )
                await conn.executemany(
                    f'''
                    INSERT INTO {self.items_table} (order_id, product_id, quantity, price)
                    VALUES ($1, $2, $3, $4)
                    ''',
                    [(order_id, item.product_id, item.quantity, item.price) for item in items]
                )
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to create order: {e}")
            raise StoreWriteError(f"Failed to create order: {e}") from e

        return self._dict_to_order(
            row,
            items=[item.model_copy(update={"name": None}) for item in items]
        )

    async def get_order(self, order_id: str) -> Optional[Order]:
        """Get order by ID"""
        async with self.db.pool.acquire() as conn:
            row = await conn.fetchrow(
                f'SELECT * FROM {self.orders_table} WHERE id = $1',
                order_id
            )
            if row is None:
                return None
            return await self._load_order(conn, row)

    async def count_orders(self, status: Optional[OrderStatus] = None) -> int:
        """Count orders, optionally filtered by status"""
        count = await self.db.query_value(
            f'SELECT COUNT(*) FROM {self.orders_table} WHERE ($1::text IS NULL OR status = $1)',
            status.value if status else None
        )
        return int(count or 0)

    async def list_orders(
        self,
        limit: int,
        offset: int,
        status: Optional[OrderStatus] = None
    ) -> List[Order]:
        """List orders in insertion order"""
        rows = await self.db.query(
            f'''
            SELECT * FROM {self.orders_table}
            WHERE ($1::text IS NULL OR status = $1)
            ORDER BY created_at, id
            LIMIT $2 OFFSET $3
            ''',
            status.value if status else None, limit, offset
        )
        return [self._dict_to_order(row) for row in rows]

    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        """Update order status"""
        try:
            async with self.db.transaction() as conn:
                row = await conn.fetchrow(
                    f'''
                    UPDATE {self.orders_table}
                    SET status = $2, updated_at = $3
                    WHERE id = $1
                    RETURNING *
                    ''',
                    order_id, status.value, datetime.now(timezone.utc)
                )
                if row is None:
                    raise RecordNotFoundError(f"Order {order_id} does not exist")
                return await self._load_order(conn, row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to update order {order_id}: {e}")
            raise StoreWriteError(f"Failed to update order {order_id}: {e}") from e

    async def record_payment(
        self,
        order_id: str,
        external_charge_id: str,
        receipt_url: str,
        paid_at: datetime
    ) -> Order:
        """
        Mark an order paid and attach its receipt.

        The order row is locked for the transaction and its state is checked
        under that lock: a concurrent delivery of the same charge finds it
        already recorded and writes nothing, while a different charge or a
        status that cannot move to PAID raises InvalidStatusTransitionError.
        """
        try:
            async with self.db.transaction() as conn:
                row = await conn.fetchrow(
                    f'SELECT * FROM {self.orders_table} WHERE id = $1 FOR UPDATE',
                    order_id
                )
                if row is None:
                    raise RecordNotFoundError(f"Order {order_id} does not exist")

                if row["paid"] and row["external_charge_id"] == external_charge_id:
                    logger.info(f"Payment {external_charge_id} already recorded for order {order_id}")
                    return await self._load_order(conn, row)

                current = OrderStatus(row["status"])
                if row["paid"] or not can_transition(current, OrderStatus.PAID):
                    raise InvalidStatusTransitionError(
                        f"Order {order_id} cannot be marked paid with charge {external_charge_id} "
                        f"from status {current.value}"
                    )

                row = await conn.fetchrow(
                    f'''
                    UPDATE {self.orders_table}
                    SET status = $2, paid = TRUE, paid_at = $3,
                        external_charge_id = $4, updated_at = $3
                    WHERE id = $1
                    RETURNING *
                    ''',
                    order_id, OrderStatus.PAID.value, paid_at, external_charge_id
                )
                await conn.execute(
                    f'''
                    INSERT INTO {self.receipts_table} (id, order_id, receipt_url, created_at, updated_at)
                    VALUES ($1, $2, $3, $4, $4)
                    ON CONFLICT (order_id) DO NOTHING
                    ''',
                    str(uuid.uuid4()), order_id, receipt_url, paid_at
                )
                return await self._load_order(conn, row)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to record payment for order {order_id}: {e}")
            raise StoreWriteError(f"Failed to record payment for order {order_id}: {e}") from e

    async def health_check(self) -> bool:
        """Check database connectivity"""
        return await self.db.query_value("SELECT 1") == 1

    async def _load_order(self, conn: asyncpg.Connection, row: asyncpg.Record) -> Order:
        """Attach items and receipt to an order row"""
        item_rows = await conn.fetch(
            f'''
            SELECT product_id, quantity, price FROM {self.items_table}
            WHERE order_id = $1
            ORDER BY id
            ''',
            row["id"]
        )
        receipt_row = await conn.fetchrow(
            f'SELECT * FROM {self.receipts_table} WHERE order_id = $1',
            row["id"]
        )
        return self._dict_to_order(
            row,
            items=[
                OrderItem(
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                    price=item["price"]
                )
                for item in item_rows
            ],
            receipt=self._dict_to_receipt(receipt_row) if receipt_row else None
        )

    def _dict_to_order(
        self,
        data: Any,
        items: Optional[List[OrderItem]] = None,
        receipt: Optional[OrderReceipt] = None
    ) -> Order:
        """Convert a database row to Order model"""
        return Order(
            id=data["id"],
            total_amount=Decimal(str(data["total_amount"])),
            total_items=data["total_items"],
            status=OrderStatus(data["status"]),
            paid=data["paid"],
            paid_at=data["paid_at"],
            external_charge_id=data["external_charge_id"],
            created_at=data["created_at"],
            updated_at=data["updated_at"],
            items=items,
            receipt=receipt
        )

    def _dict_to_receipt(self, data: Dict[str, Any]) -> OrderReceipt:
        """Convert a database row to OrderReceipt model"""
        return OrderReceipt(
            id=data["id"],
            order_id=data["order_id"],
            receipt_url=data["receipt_url"],
            created_at=data["created_at"]
        )
