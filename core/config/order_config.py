#!/usr/bin/env python3
"""Order service main configuration

Combines all sub-configs and validates them before the service starts.
"""
import os
from dataclasses import dataclass, field

from .infra_config import InfraConfig
from .logging_config import LoggingConfig
from .service_config import ServiceConfig


def _bool(val: str) -> bool:
    return val.lower() == "true"


class ConfigError(Exception):
    """Raised when the environment does not describe a usable configuration"""
    pass


@dataclass
class OrderConfig:
    """Main order service configuration with all sub-configs"""

    # Environment
    environment: str = "development"
    debug: bool = False

    # Sub-configurations
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    infrastructure: InfraConfig = field(default_factory=InfraConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)

    @classmethod
    def from_env(cls) -> 'OrderConfig':
        """Load complete configuration from environment"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            environment=env,
            debug=_bool(os.getenv("DEBUG", "true" if env == "development" else "false")),
            logging=LoggingConfig.from_env(),
            infrastructure=InfraConfig.from_env(),
            service=ServiceConfig.from_env(),
        )

    def validate(self) -> 'OrderConfig':
        """Fail fast on settings the service cannot run with"""
        errors = []
        if not self.infrastructure.nats_servers:
            errors.append("NATS_SERVERS must name at least one server")
        if self.infrastructure.postgres_pool_min < 1:
            errors.append("POSTGRES_POOL_MIN must be positive")
        if self.infrastructure.postgres_pool_min > self.infrastructure.postgres_pool_max:
            errors.append("POSTGRES_POOL_MIN must not exceed POSTGRES_POOL_MAX")
        if self.service.request_timeout_seconds <= 0:
            errors.append("REQUEST_TIMEOUT_SECONDS must be positive")
        if not self.service.payment_currency:
            errors.append("PAYMENT_CURRENCY must not be empty")

        if errors:
            raise ConfigError(f"Config validation error: {'; '.join(errors)}")
        return self
