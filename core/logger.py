"""
Service Logger Setup

Configures stdlib logging for a microservice from LoggingConfig. Structured
output is rendered by structlog so records from stdlib loggers and nats-py
come out as one JSON object per line.

Usage:
    from core.logger import setup_service_logger
    logger = setup_service_logger("order_service")
"""

import logging
import sys
from typing import Optional

import structlog

from core.config import LoggingConfig


def build_structured_formatter(service_name: str, environment: str) -> structlog.stdlib.ProcessorFormatter:
    """JSON formatter for stdlib handlers, tagged with service and environment"""

    def add_service_context(logger, method_name, event_dict):
        event_dict.setdefault("service", service_name)
        event_dict.setdefault("environment", environment)
        return event_dict

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            add_service_context,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(default=str),
        ],
    )


def setup_service_logger(
    service_name: str,
    config: Optional[LoggingConfig] = None
) -> logging.Logger:
    """
    Configure the root logger for a service and return the service logger.

    Args:
        service_name: Name used for the returned logger and structured output
        config: Logging configuration (defaults to LoggingConfig.from_env())

    Returns:
        Logger named after the service
    """
    if config is None:
        config = LoggingConfig.from_env()

    if config.enable_structured:
        formatter = build_structured_formatter(service_name, config.environment)
    else:
        formatter = logging.Formatter(config.log_format)

    root = logging.getLogger()
    root.setLevel(config.log_level.upper())

    # Re-running setup must not duplicate output
    for handler in list(root.handlers):
        if getattr(handler, "_service_handler", False):
            root.removeHandler(handler)

    handlers = []
    if config.enable_console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler._service_handler = True
        root.addHandler(handler)

    # nats-py is chatty at DEBUG
    logging.getLogger("nats").setLevel(logging.WARNING)

    return logging.getLogger(service_name)
