"""
NATS Message Bus for Python Microservices

Request/reply and fire-and-forget messaging over nats-py.

A service uses one NATSMessageBus to:
- serve command subjects (every request gets exactly one JSON reply)
- call other services with request/reply
- consume fire-and-forget notifications

Payloads are UTF-8 JSON on the wire.
"""

import asyncio
import json
import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

import nats
from nats.aio.client import Client as NATS
from nats.aio.msg import Msg
from nats.errors import ConnectionClosedError, NoRespondersError, NoServersError
from nats.errors import Error as NATSError
from nats.errors import TimeoutError as NATSTimeoutError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

RequestHandler = Callable[[Any], Awaitable[Any]]
EventHandler = Callable[[Any], Awaitable[None]]


class DecimalEncoder(json.JSONEncoder):
    """Custom JSON encoder that handles Decimal, datetime and Enum types"""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


def encode_payload(payload: Any) -> bytes:
    """Serialize a payload for the wire"""
    return json.dumps(payload, cls=DecimalEncoder).encode()


def decode_payload(data: bytes) -> Any:
    """Deserialize a wire payload; an empty body decodes to None"""
    if not data:
        return None
    return json.loads(data.decode())


class MessageBusError(Exception):
    """Transport-level failure: timeout, no responders or lost connection"""

    def __init__(self, subject: str, message: str):
        super().__init__(f"{subject}: {message}")
        self.subject = subject


class NATSMessageBus:
    """
    NATS message bus using nats-py.

    Served subjects dispatch each message to its own task so independent
    requests are processed concurrently.
    """

    def __init__(
        self,
        service_name: str,
        servers: List[str],
        request_timeout: float = 5.0,
    ):
        """
        Initialize NATS Message Bus.

        Args:
            service_name: Name of the service (used as the connection name)
            servers: NATS server URLs
            request_timeout: Default timeout for outbound requests in seconds
        """
        self.service_name = service_name
        self.servers = servers
        self.request_timeout = request_timeout

        self._nc: Optional[NATS] = None
        self._subscriptions: Dict[str, Any] = {}
        self._tasks: Set[asyncio.Task] = set()

        logger.info(f"NATS MessageBus initialized: {', '.join(servers)}")

    @retry(
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((NoServersError, OSError, asyncio.TimeoutError)),
        reraise=True
    )
    async def _open_connection(self) -> NATS:
        return await nats.connect(
            servers=self.servers,
            name=self.service_name,
            disconnected_cb=self._on_disconnected,
            reconnected_cb=self._on_reconnected,
            error_cb=self._on_error,
        )

    async def connect(self):
        """Connect to NATS, retrying with backoff while servers are unreachable"""
        try:
            self._nc = await self._open_connection()
            logger.info(f"Connected to NATS as {self.service_name}")
        except Exception as e:
            logger.error(f"Failed to connect to NATS: {e}")
            raise

    async def _on_disconnected(self):
        logger.warning("Disconnected from NATS")

    async def _on_reconnected(self):
        logger.info("Reconnected to NATS")

    async def _on_error(self, e: Exception):
        logger.error(f"NATS error: {e}")

    def _require_connection(self, subject: str) -> NATS:
        if self._nc is None or not self._nc.is_connected:
            raise MessageBusError(subject, "not connected to NATS")
        return self._nc

    async def request(self, subject: str, payload: Any, timeout: Optional[float] = None) -> Any:
        """
        Send a request and wait for the decoded reply.

        Raises:
            MessageBusError: on timeout, missing responders or connection loss
        """
        nc = self._require_connection(subject)
        try:
            msg = await nc.request(
                subject,
                encode_payload(payload),
                timeout=timeout or self.request_timeout
            )
        except NoRespondersError:
            raise MessageBusError(subject, "no responders available")
        except NATSTimeoutError:
            raise MessageBusError(subject, "request timed out")
        except ConnectionClosedError:
            raise MessageBusError(subject, "connection closed")
        except NATSError as e:
            raise MessageBusError(subject, str(e))

        return decode_payload(msg.data)

    async def publish(self, subject: str, payload: Any) -> None:
        """Fire-and-forget publish"""
        nc = self._require_connection(subject)
        await nc.publish(subject, encode_payload(payload))

    async def serve(self, subject: str, handler: RequestHandler, queue: str = "") -> None:
        """
        Serve a request subject.

        The handler receives the decoded payload and returns the reply
        payload; the reply is always sent, also when the handler fails.
        """
        nc = self._require_connection(subject)

        async def _on_message(msg: Msg):
            self._spawn(self._handle_request(msg, handler))

        self._subscriptions[subject] = await nc.subscribe(subject, queue=queue, cb=_on_message)
        logger.info(f"Serving {subject} (queue={queue or '-'})")

    async def subscribe_to_events(self, subject: str, handler: EventHandler, queue: str = "") -> None:
        """Subscribe to fire-and-forget notifications on a subject"""
        nc = self._require_connection(subject)

        async def _on_message(msg: Msg):
            self._spawn(self._handle_event(msg, handler))

        self._subscriptions[subject] = await nc.subscribe(subject, queue=queue, cb=_on_message)
        logger.info(f"Subscribed to {subject} (queue={queue or '-'})")

    def _spawn(self, coro) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _handle_request(self, msg: Msg, handler: RequestHandler) -> None:
        try:
            payload = decode_payload(msg.data)
        except ValueError as e:
            logger.warning(f"Undecodable request on {msg.subject}: {e}")
            reply = {
                "success": False,
                "message": "Malformed JSON payload",
                "error": {"status": 400, "message": "Malformed JSON payload", "kind": "VALIDATION_ERROR"},
            }
        else:
            try:
                reply = await handler(payload)
            except Exception as e:
                logger.error(f"Unhandled error serving {msg.subject}: {e}", exc_info=True)
                reply = {
                    "success": False,
                    "message": "Internal server error",
                    "error": {"status": 500, "message": "Internal server error", "kind": "INTERNAL_ERROR"},
                }

        if not msg.reply:
            logger.debug(f"Request on {msg.subject} carries no reply subject, dropping reply")
            return
        try:
            await msg.respond(encode_payload(reply))
        except NATSError as e:
            logger.error(f"Failed to reply on {msg.subject}: {e}")

    async def _handle_event(self, msg: Msg, handler: EventHandler) -> None:
        try:
            payload = decode_payload(msg.data)
            await handler(payload)
        except Exception as e:
            logger.error(f"Error processing event on {msg.subject}: {e}", exc_info=True)

    async def unsubscribe(self, subject: str) -> bool:
        """Stop serving or consuming a subject"""
        sub = self._subscriptions.pop(subject, None)
        if sub is None:
            return False
        await sub.unsubscribe()
        logger.info(f"Unsubscribed from {subject}")
        return True

    async def close(self):
        """Drain subscriptions, wait for in-flight handlers and close"""
        for subject, sub in list(self._subscriptions.items()):
            try:
                await sub.drain()
            except NATSError as e:
                logger.warning(f"Failed to drain {subject}: {e}")
        self._subscriptions.clear()

        # Replies still need an open connection
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        if self._nc is not None and not self._nc.is_closed:
            await self._nc.close()
        self._nc = None
        logger.info("Disconnected from NATS")

    @property
    def is_connected(self) -> bool:
        """Check if connected to NATS"""
        return self._nc is not None and self._nc.is_connected
