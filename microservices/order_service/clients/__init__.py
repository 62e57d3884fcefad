"""
Order Service Clients Module

Bus clients for request/reply communication with other services
"""

from .payment_client import PaymentClient
from .product_client import ProductClient

__all__ = [
    "PaymentClient",
    "ProductClient",
]
