"""
Order Service Bus Client Tests

ProductClient and PaymentClient against the mock bus: request shapes,
reply parsing and error mapping.
"""
import pytest

from microservices.order_service.clients import PaymentClient, ProductClient
from microservices.order_service.errors import (
    DependencyUnavailableError,
    InvalidProductReferenceError,
)
from microservices.order_service.models import PaymentSessionItem, PaymentSessionRequest

pytestmark = [pytest.mark.component, pytest.mark.asyncio]


@pytest.fixture
def product_client(mock_bus):
    return ProductClient(mock_bus, subject="validate_products", timeout=2.0)


@pytest.fixture
def payment_client(mock_bus):
    return PaymentClient(mock_bus, subject="create.payment.session", timeout=2.0)


def _session_request():
    return PaymentSessionRequest(
        order_id="o1",
        currency="usd",
        items=[PaymentSessionItem(name="A", price=10.0, quantity=2)],
    )


class TestProductClient:

    async def test_sends_ids_and_parses_products(self, product_client, mock_bus):
        mock_bus.set_reply("validate_products", [
            {"id": 1, "name": "A", "price": 10},
            {"id": "2", "name": "B", "price": "5.25"},
        ])

        products = await product_client.validate_products(["1", "2"])

        assert mock_bus.get_requests("validate_products") == [
            {"subject": "validate_products", "payload": {"ids": ["1", "2"]}, "timeout": 2.0}
        ]
        assert [(p.id, p.name, str(p.price)) for p in products] == [("1", "A", "10"), ("2", "B", "5.25")]

    async def test_subset_reply(self, product_client, mock_bus):
        mock_bus.set_reply("validate_products", [{"id": "1", "name": "A", "price": 1}])

        products = await product_client.validate_products(["1", "2"])

        assert [p.id for p in products] == ["1"]

    async def test_timeout_is_dependency_unavailable(self, product_client, mock_bus):
        mock_bus.set_unavailable("validate_products")

        with pytest.raises(DependencyUnavailableError):
            await product_client.validate_products(["1"])

    async def test_no_responders_is_dependency_unavailable(self, product_client):
        with pytest.raises(DependencyUnavailableError):
            await product_client.validate_products(["1"])

    @pytest.mark.parametrize("reply", [
        {"status": 400, "message": "Products were not found"},
        {"success": False, "error": {"status": 404, "message": "Products were not found"}},
        {"err": {"statusCode": 400, "message": "Products were not found"}},
    ])
    async def test_client_error_reply_is_invalid_reference(self, product_client, mock_bus, reply):
        mock_bus.set_reply("validate_products", reply)

        with pytest.raises(InvalidProductReferenceError) as exc_info:
            await product_client.validate_products(["9"])

        assert exc_info.value.message == "Products were not found"

    async def test_server_error_reply_is_dependency_unavailable(self, product_client, mock_bus):
        mock_bus.set_reply("validate_products", {"status": 500, "message": "db down"})

        with pytest.raises(DependencyUnavailableError):
            await product_client.validate_products(["1"])

    @pytest.mark.parametrize("reply", [
        "nonsense",
        [{"id": "1"}],
        None,
    ])
    async def test_garbage_reply(self, product_client, mock_bus, reply):
        mock_bus.set_reply("validate_products", reply)

        with pytest.raises(DependencyUnavailableError):
            await product_client.validate_products(["1"])


class TestPaymentClient:

    async def test_sends_camel_case_request(self, payment_client, mock_bus):
        mock_bus.set_reply("create.payment.session", {"url": "https://pay/cs_1"})

        session = await payment_client.create_payment_session(_session_request())

        assert session == {"url": "https://pay/cs_1"}
        assert mock_bus.get_requests("create.payment.session")[0]["payload"] == {
            "orderId": "o1",
            "currency": "usd",
            "items": [{"name": "A", "price": 10.0, "quantity": 2}],
        }

    async def test_transport_failure(self, payment_client, mock_bus):
        mock_bus.set_unavailable("create.payment.session", "connection closed")

        with pytest.raises(DependencyUnavailableError):
            await payment_client.create_payment_session(_session_request())

    async def test_error_reply(self, payment_client, mock_bus):
        mock_bus.set_reply("create.payment.session", {"status": 400, "message": "bad currency"})

        with pytest.raises(DependencyUnavailableError):
            await payment_client.create_payment_session(_session_request())

    async def test_non_object_reply(self, payment_client, mock_bus):
        mock_bus.set_reply("create.payment.session", ["not", "a", "session"])

        with pytest.raises(DependencyUnavailableError):
            await payment_client.create_payment_session(_session_request())
