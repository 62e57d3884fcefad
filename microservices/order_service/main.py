"""
Order Microservice

Responsibilities:
- Order creation against the product catalog
- Order queries and status lifecycle
- Payment session initiation
- Paid notification reconciliation

Served entirely over NATS; there is no HTTP surface.
"""

import asyncio
import logging
import signal
from typing import Optional

from core.config import ConfigError, OrderConfig, get_settings
from core.logger import setup_service_logger
from core.nats_client import NATSMessageBus
from core.postgres_client import PostgresClient

from .events import get_event_handlers
from .factory import create_order_service
from .message_handlers import get_message_handlers
from .order_service import OrderService
from .routes_registry import SERVICE_METADATA, get_routes_summary

logger = logging.getLogger(__name__)


class OrderMicroservice:
    """Order microservice core class"""

    def __init__(self, config: OrderConfig):
        self.config = config
        self.bus: Optional[NATSMessageBus] = None
        self.db: Optional[PostgresClient] = None
        self.order_service: Optional[OrderService] = None
        self._stop = asyncio.Event()

    async def initialize(self):
        """Connect infrastructure and register all subjects"""
        infra = self.config.infrastructure
        service = self.config.service

        self.db = PostgresClient(
            SERVICE_METADATA["service_name"],
            infra.postgres_dsn,
            min_size=infra.postgres_pool_min,
            max_size=infra.postgres_pool_max,
        )
        await self.db.connect()
        logger.info("✅ PostgreSQL pool ready")

        self.bus = NATSMessageBus(
            SERVICE_METADATA["service_name"],
            infra.nats_servers,
            request_timeout=service.request_timeout_seconds,
        )
        await self.bus.connect()
        logger.info("✅ Message bus connected")

        self.order_service = create_order_service(self.config, self.bus, self.db)

        for subject, handler in get_message_handlers(self.order_service).items():
            await self.bus.serve(subject, handler, queue=service.queue_group)

        event_handlers = get_event_handlers(self.order_service, paid_subject=service.order_paid_subject)
        for subject, handler in event_handlers.items():
            await self.bus.subscribe_to_events(subject, handler, queue=service.queue_group)
        logger.info(f"✅ Subscribed to {len(event_handlers)} event types")

        logger.info(f"Order microservice initialized successfully: {get_routes_summary()}")

    def request_stop(self):
        """Signal the run loop to shut down"""
        self._stop.set()

    async def run(self):
        """Serve until SIGINT/SIGTERM"""
        loop = asyncio.get_running_loop()
        installed = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_stop)
                installed.append(sig)
            except (NotImplementedError, RuntimeError):
                # Windows event loops and non-main threads
                logger.debug(f"Signal handler for {sig.name} not installed")

        try:
            await self.initialize()
            await self._stop.wait()
            logger.info("Shutdown requested")
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)
            await self.shutdown()

    async def shutdown(self):
        """Shutdown the microservice"""
        try:
            if self.bus:
                await self.bus.close()
                logger.info("Message bus closed")
            if self.db:
                await self.db.close()
                logger.info("PostgreSQL pool closed")
            logger.info("Order microservice shutdown completed")
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")


def main():
    config = get_settings()
    setup_service_logger(config.logging.service_name, config.logging)

    try:
        config.validate()
    except ConfigError as e:
        logger.error(f"❌ {e}")
        raise SystemExit(1)

    logger.info(f"Starting order_service ({config.environment})")
    asyncio.run(OrderMicroservice(config).run())


if __name__ == "__main__":
    main()
