#!/usr/bin/env python3
"""Order service messaging configuration

Subjects served and consumed by the order service, plus the knobs for
its outbound request/reply calls.
"""
import os
from dataclasses import dataclass


def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


@dataclass
class ServiceConfig:
    """Order service settings"""

    # Queue group shared by all order_service instances
    queue_group: str = "order_service"

    # ===========================================
    # Collaborator subjects
    # ===========================================
    product_validate_subject: str = "validate_products"
    payment_session_subject: str = "create.payment.session"

    # Inbound paid notification from the payment service
    order_paid_subject: str = "order.paid"

    payment_currency: str = "usd"
    request_timeout_seconds: float = 5.0

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        """Load order service settings from environment"""
        return cls(
            queue_group=os.getenv("ORDER_SERVICE_QUEUE_GROUP", "order_service"),
            product_validate_subject=os.getenv("PRODUCT_VALIDATE_SUBJECT", "validate_products"),
            payment_session_subject=os.getenv("PAYMENT_SESSION_SUBJECT", "create.payment.session"),
            order_paid_subject=os.getenv("ORDER_PAID_SUBJECT", "order.paid"),
            payment_currency=os.getenv("PAYMENT_CURRENCY", "usd"),
            request_timeout_seconds=_float(os.getenv("REQUEST_TIMEOUT_SECONDS", "5"), 5.0),
        )
