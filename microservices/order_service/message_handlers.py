"""
Order Service Message Handlers

Maps command subjects onto OrderService calls. Each handler validates the
inbound payload, calls the service and returns the JSON-ready reply.
"""

import logging
from typing import Any, Awaitable, Callable, Dict

from pydantic import BaseModel, ValidationError

from .errors import ErrorKind, RpcError
from .models import (
    ChangeOrderStatusRequest, CreateOrderRequest, FindOneRequest, Order,
    OrderPaginationRequest
)
from .order_service import OrderService

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Any], Awaitable[Dict[str, Any]]]


def to_reply(response: BaseModel) -> Dict[str, Any]:
    """Dump a response model in its wire shape"""
    return response.model_dump(mode="json", by_alias=True)


def validation_failure(subject: str, error: ValidationError) -> Dict[str, Any]:
    """Reply for a payload that does not match the command's input shape"""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in detail['loc']) or 'payload'}: {detail['msg']}"
        for detail in error.errors()
    )
    logger.warning(f"Invalid payload on {subject}: {problems}")
    rpc_error = RpcError.of(ErrorKind.VALIDATION_ERROR, f"Invalid request: {problems}")
    return {
        "success": False,
        "message": rpc_error.message,
        "error": rpc_error.model_dump(mode="json"),
    }


def get_message_handlers(order_service: OrderService) -> Dict[str, MessageHandler]:
    """
    Return the command subject -> handler mapping

    Returns:
        Dict mapping subjects to async handler functions
    """

    async def create_order(payload: Any) -> Dict[str, Any]:
        try:
            request = CreateOrderRequest.model_validate(payload)
        except ValidationError as e:
            return validation_failure("order.create", e)
        return to_reply(await order_service.create_order(request))

    async def find_all_orders(payload: Any) -> Dict[str, Any]:
        try:
            request = OrderPaginationRequest.model_validate(payload or {})
        except ValidationError as e:
            return validation_failure("order.findAll", e)
        return to_reply(await order_service.list_orders(request))

    async def find_one_order(payload: Any) -> Dict[str, Any]:
        # A bare id string is accepted as well as {"id": ...}
        if isinstance(payload, str):
            payload = {"id": payload}
        try:
            request = FindOneRequest.model_validate(payload)
        except ValidationError as e:
            return validation_failure("order.findOne", e)
        return to_reply(await order_service.get_order(request.id))

    async def change_order_status(payload: Any) -> Dict[str, Any]:
        try:
            request = ChangeOrderStatusRequest.model_validate(payload)
        except ValidationError as e:
            return validation_failure("order.changeStatus", e)
        return to_reply(await order_service.change_order_status(request))

    async def create_payment_session(payload: Any) -> Dict[str, Any]:
        try:
            order = Order.model_validate(payload)
        except ValidationError as e:
            return validation_failure("order.createPaymentSession", e)
        return to_reply(await order_service.create_payment_session(order))

    async def health(payload: Any) -> Dict[str, Any]:
        return to_reply(await order_service.health_check())

    return {
        "order.create": create_order,
        "order.findAll": find_all_orders,
        "order.findOne": find_one_order,
        "order.changeStatus": change_order_status,
        "order.createPaymentSession": create_payment_session,
        "order.health": health,
    }
