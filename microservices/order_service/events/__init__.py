"""
Order Service Events Module

Exports all event-related functionality for order service
"""

from .models import PaidOrderEvent

from .handlers import get_event_handlers, handle_order_paid

__all__ = [
    # Event Models
    "PaidOrderEvent",
    # Handlers
    "get_event_handlers",
    "handle_order_paid",
]
