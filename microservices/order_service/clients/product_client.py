"""
Product Catalog Client for Order Service

Request/reply client for the product catalog over the message bus
"""

import logging
from typing import Any, List

from pydantic import ValidationError

from core.nats_client import MessageBusError, NATSMessageBus
from ..errors import DependencyUnavailableError, InvalidProductReferenceError
from ..models import Product
from .replies import extract_error

logger = logging.getLogger(__name__)


class ProductClient:
    """Client for the product catalog"""

    def __init__(self, bus: NATSMessageBus, subject: str = "validate_products", timeout: float = 5.0):
        """
        Initialize Product client

        Args:
            bus: Connected message bus
            subject: Catalog validation subject
            timeout: Reply timeout in seconds
        """
        self.bus = bus
        self.subject = subject
        self.timeout = timeout
        logger.info(f"ProductClient initialized on subject: {subject}")

    async def validate_products(self, ids: List[str]) -> List[Product]:
        """
        Resolve product IDs against the catalog

        Args:
            ids: Product IDs to resolve

        Returns:
            The products the catalog knows; may be a subset of ids

        Raises:
            InvalidProductReferenceError: catalog rejected the IDs
            DependencyUnavailableError: catalog unreachable or replied garbage
        """
        try:
            reply = await self.bus.request(self.subject, {"ids": ids}, timeout=self.timeout)
        except MessageBusError as e:
            logger.error(f"Product catalog request failed: {e}")
            raise DependencyUnavailableError("Product service unavailable") from e

        error = extract_error(reply)
        if error:
            status, message = error
            logger.warning(f"Product catalog rejected {ids}: [{status}] {message}")
            if 400 <= status < 500:
                raise InvalidProductReferenceError(message)
            raise DependencyUnavailableError("Product service unavailable")

        return self._parse_products(reply)

    def _parse_products(self, reply: Any) -> List[Product]:
        if isinstance(reply, dict):
            reply = reply.get("data", reply.get("products"))
        if not isinstance(reply, list):
            logger.error(f"Unexpected product catalog reply: {reply!r}")
            raise DependencyUnavailableError("Product service returned an invalid reply")
        try:
            return [Product.model_validate(item) for item in reply]
        except ValidationError as e:
            logger.error(f"Invalid product in catalog reply: {e}")
            raise DependencyUnavailableError("Product service returned an invalid reply") from e
