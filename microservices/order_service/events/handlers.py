"""
Order Service Event Handlers

Handlers for notifications from other services
"""

import logging
from typing import Any, Awaitable, Callable, Dict

from pydantic import ValidationError

from .models import PaidOrderEvent

logger = logging.getLogger(__name__)


async def handle_order_paid(event_data: Dict[str, Any], order_service) -> None:
    """
    Handle order.paid notification
    Record the payment and receipt on the order

    Redelivered notifications are absorbed by OrderService.mark_order_paid.
    """
    try:
        event = PaidOrderEvent.model_validate(event_data or {})
    except ValidationError as e:
        logger.warning(f"Discarding malformed paid notification: {e.errors()}")
        return

    result = await order_service.mark_order_paid(event)
    if result.success:
        logger.info(f"✅ Paid notification applied to order {event.order_id}: {result.message}")
    else:
        logger.error(f"❌ Paid notification for order {event.order_id} rejected: {result.message}")


def get_event_handlers(order_service, paid_subject: str = "order.paid") -> Dict[str, Callable[[Any], Awaitable[None]]]:
    """
    Get all event handlers for order service.

    Returns a dict mapping subjects to handler functions.
    This is used by main.py to register all event subscriptions.

    Args:
        order_service: OrderService instance
        paid_subject: Subject the payment service publishes paid notifications on

    Returns:
        Dict[str, callable]: Subject -> handler function mapping
    """
    return {
        paid_subject: lambda event_data: handle_order_paid(event_data, order_service),
    }
