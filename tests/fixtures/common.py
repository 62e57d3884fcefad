"""
Common/Shared Fixtures

Base factories and generators used across multiple test layers.
"""
import uuid
from datetime import datetime, timezone


def make_order_id() -> str:
    """Generate a unique order ID"""
    return str(uuid.uuid4())


def make_product_id() -> str:
    """Generate a unique product ID"""
    return f"prod_test_{uuid.uuid4().hex[:8]}"


def make_charge_id() -> str:
    """Generate a unique external charge ID"""
    return f"ch_test_{uuid.uuid4().hex[:16]}"


def make_timestamp() -> datetime:
    """Current UTC timestamp"""
    return datetime.now(timezone.utc)
