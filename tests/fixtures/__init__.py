"""
Shared Test Fixtures

Centralized factories used across all test layers.

Structure:
    - common.py: Base ID generators, timestamps
    - order_fixtures.py: Order service factories
"""

# Common utilities
from .common import (
    make_order_id,
    make_product_id,
    make_charge_id,
    make_timestamp,
)

# Order service fixtures
from .order_fixtures import (
    make_product,
    make_order_item,
    make_order,
    make_create_order_payload,
    make_paid_event_payload,
)

__all__ = [
    "make_order_id",
    "make_product_id",
    "make_charge_id",
    "make_timestamp",
    "make_product",
    "make_order_item",
    "make_order",
    "make_create_order_payload",
    "make_paid_event_payload",
]
