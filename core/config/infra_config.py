#!/usr/bin/env python3
"""Infrastructure services configuration

Endpoints for the infrastructure the order service talks to through
native drivers: PostgreSQL (asyncpg) and NATS (nats-py).
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional


def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


def _list(val: str) -> List[str]:
    return [item.strip() for item in val.split(",") if item.strip()]


@dataclass
class InfraConfig:
    """Infrastructure service endpoints"""

    # ===========================================
    # PostgreSQL (native asyncpg - port 5432)
    # ===========================================
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "orders_db"
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_pool_min: int = 1
    postgres_pool_max: int = 10
    database_url: Optional[str] = None

    # ===========================================
    # NATS (native - port 4222)
    # ===========================================
    nats_servers: List[str] = field(default_factory=lambda: ["nats://localhost:4222"])

    @property
    def postgres_dsn(self) -> str:
        """DSN handed to asyncpg; DATABASE_URL wins over the POSTGRES_* parts"""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @classmethod
    def from_env(cls) -> 'InfraConfig':
        """Load infrastructure config from environment"""
        return cls(
            # PostgreSQL
            postgres_host=os.getenv("POSTGRES_HOST", "localhost"),
            postgres_port=_int(os.getenv("POSTGRES_PORT", "5432"), 5432),
            postgres_db=os.getenv("POSTGRES_DB", "orders_db"),
            postgres_user=os.getenv("POSTGRES_USER", "postgres"),
            postgres_password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            postgres_pool_min=_int(os.getenv("POSTGRES_POOL_MIN", "1"), 1),
            postgres_pool_max=_int(os.getenv("POSTGRES_POOL_MAX", "10"), 10),
            database_url=os.getenv("DATABASE_URL"),

            # NATS
            nats_servers=_list(os.getenv("NATS_SERVERS", "nats://localhost:4222")),
        )
