"""
Payment Service Client for Order Service

Request/reply client for payment_service over the message bus
"""

import logging
from typing import Any, Dict

from core.nats_client import MessageBusError, NATSMessageBus
from ..errors import DependencyUnavailableError
from ..models import PaymentSessionRequest
from .replies import extract_error

logger = logging.getLogger(__name__)


class PaymentClient:
    """Client for payment_service"""

    def __init__(self, bus: NATSMessageBus, subject: str = "create.payment.session", timeout: float = 5.0):
        self.bus = bus
        self.subject = subject
        self.timeout = timeout
        logger.info(f"PaymentClient initialized on subject: {subject}")

    async def create_payment_session(self, request: PaymentSessionRequest) -> Dict[str, Any]:
        """
        Open a payment session

        Returns:
            The payment service's session handle, passed through unchanged
        """
        try:
            reply = await self.bus.request(
                self.subject,
                request.model_dump(mode="json", by_alias=True),
                timeout=self.timeout
            )
        except MessageBusError as e:
            logger.error(f"Payment session request for order {request.order_id} failed: {e}")
            raise DependencyUnavailableError("Payment service unavailable") from e

        error = extract_error(reply)
        if error:
            status, message = error
            logger.error(f"Payment service rejected order {request.order_id}: [{status}] {message}")
            raise DependencyUnavailableError(f"Payment service error: {message}")

        if not isinstance(reply, dict):
            logger.error(f"Unexpected payment session reply: {reply!r}")
            raise DependencyUnavailableError("Payment service returned an invalid reply")

        return reply
