"""
Order Service Factory

Factory functions for creating service instances with real dependencies.
This is the ONLY place that imports I/O-dependent modules.

Usage:
    from .factory import create_order_service
    service = create_order_service(config, bus, db)
"""
from core.config import OrderConfig
from core.nats_client import NATSMessageBus
from core.postgres_client import PostgresClient

from .order_service import OrderService


def create_order_service(
    config: OrderConfig,
    bus: NATSMessageBus,
    db: PostgresClient,
) -> OrderService:
    """
    Create OrderService with real dependencies.

    This function imports the real repository and clients (which have I/O
    dependencies). Use this in production, NOT in tests.

    Args:
        config: Order service configuration
        bus: Connected message bus used by the collaborator clients
        db: Connected PostgreSQL client

    Returns:
        Configured OrderService instance
    """
    # Import real implementations here (not at module level)
    from .order_repository import OrderRepository
    from .clients import PaymentClient, ProductClient

    service_config = config.service

    return OrderService(
        repository=OrderRepository(db),
        product_client=ProductClient(
            bus,
            subject=service_config.product_validate_subject,
            timeout=service_config.request_timeout_seconds,
        ),
        payment_client=PaymentClient(
            bus,
            subject=service_config.payment_session_subject,
            timeout=service_config.request_timeout_seconds,
        ),
        currency=service_config.payment_currency,
    )
