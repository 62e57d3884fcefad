"""
Order Service Routes Registry
Defines every subject the service serves, consumes and calls
"""

from typing import List, Dict, Any

# Commands served (request/reply)
SERVICE_ROUTES = [
    {
        "subject": "order.create",
        "kind": "command",
        "description": "Create an order from catalog-validated items"
    },
    {
        "subject": "order.findAll",
        "kind": "command",
        "description": "Paginated, status-filtered order listing"
    },
    {
        "subject": "order.findOne",
        "kind": "command",
        "description": "Get order with items and product names"
    },
    {
        "subject": "order.changeStatus",
        "kind": "command",
        "description": "Move an order along the status lifecycle"
    },
    {
        "subject": "order.createPaymentSession",
        "kind": "command",
        "description": "Open a payment session for an order"
    },
    {
        "subject": "order.health",
        "kind": "command",
        "description": "Service health check"
    },
]

# Notifications consumed (fire-and-forget)
CONSUMED_EVENTS = [
    {
        "subject": "order.paid",
        "source": "payment_service",
        "description": "Order paid; record charge and receipt"
    },
]

# Collaborator subjects called (request/reply)
OUTBOUND_CALLS = [
    {
        "subject": "validate_products",
        "target": "product_service",
        "description": "Resolve product IDs to {id, name, price}"
    },
    {
        "subject": "create.payment.session",
        "target": "payment_service",
        "description": "Open a payment session"
    },
]


def get_command_subjects() -> List[str]:
    """Subjects served by the order service"""
    return [route["subject"] for route in SERVICE_ROUTES]


def get_routes_summary() -> Dict[str, Any]:
    """Compact summary logged at startup"""
    return {
        "service_name": SERVICE_METADATA["service_name"],
        "commands": ",".join(get_command_subjects()),
        "consumes": ",".join(event["subject"] for event in CONSUMED_EVENTS),
        "calls": ",".join(call["subject"] for call in OUTBOUND_CALLS),
    }


# 服务元数据
SERVICE_METADATA = {
    "service_name": "order_service",
    "version": "1.0.0",
    "tags": ["v1", "order-management", "e-commerce", "nats"],
    "capabilities": [
        "order_creation",
        "order_listing",
        "order_status_lifecycle",
        "payment_session",
        "payment_reconciliation"
    ]
}
