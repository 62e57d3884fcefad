#!/usr/bin/env python3
"""
Core Module for the Order Service

Shared infrastructure used by the order microservice.

COMPONENTS:
    - config/: Environment-driven configuration (dataclasses + python-dotenv)
    - logger.py: Service logger setup
    - nats_client.py: NATS message bus (request/reply and notifications)
    - postgres_client.py: asyncpg pool with transaction helper

USAGE:
    from core.config import get_settings
    from core.nats_client import NATSMessageBus

    settings = get_settings()
    bus = NATSMessageBus("order_service", settings.infrastructure.nats_servers)
"""

__version__ = "1.0.0"
