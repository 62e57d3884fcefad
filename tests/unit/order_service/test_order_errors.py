"""
Order Service - Error Translator Unit Tests
"""

import logging

import pytest

from microservices.order_service.errors import (
    STATUS_BY_KIND,
    DependencyUnavailableError,
    ErrorKind,
    InvalidProductReferenceError,
    InvalidStatusTransitionError,
    OrderNotFoundError,
    OrderValidationError,
    RecordNotFoundError,
    RpcError,
    StoreWriteError,
    translate_error,
)

pytestmark = [pytest.mark.unit]


class TestErrorKinds:

    def test_every_kind_has_a_status(self):
        assert set(STATUS_BY_KIND) == set(ErrorKind)

    @pytest.mark.parametrize("kind,status", [
        (ErrorKind.INVALID_REFERENCE, 400),
        (ErrorKind.INVALID_TRANSITION, 400),
        (ErrorKind.NOT_FOUND, 404),
        (ErrorKind.DEPENDENCY_UNAVAILABLE, 503),
        (ErrorKind.STORE_WRITE_FAILURE, 500),
        (ErrorKind.INTERNAL_ERROR, 500),
    ])
    def test_status_classes(self, kind, status):
        assert RpcError.of(kind, "m").status == status

    def test_rpc_error_wire_shape(self):
        assert RpcError.of(ErrorKind.NOT_FOUND, "gone").model_dump(mode="json") == {
            "status": 404, "message": "gone", "kind": "NOT_FOUND"
        }


class TestTranslateError:

    @pytest.mark.parametrize("error,kind", [
        (OrderNotFoundError("Order with id #1 not found"), ErrorKind.NOT_FOUND),
        (InvalidProductReferenceError("Products not found: 9"), ErrorKind.INVALID_REFERENCE),
        (InvalidStatusTransitionError("Cannot change"), ErrorKind.INVALID_TRANSITION),
        (DependencyUnavailableError("Product service unavailable"), ErrorKind.DEPENDENCY_UNAVAILABLE),
        (OrderValidationError("bad"), ErrorKind.VALIDATION_ERROR),
    ])
    def test_domain_errors_pass_through(self, error, kind):
        rpc_error = translate_error(error)

        assert rpc_error.kind == kind
        assert rpc_error.message == error.message
        assert rpc_error.status == error.status

    def test_record_missing_is_bad_request(self):
        rpc_error = translate_error(RecordNotFoundError("Order 1 does not exist"))

        assert rpc_error.kind == ErrorKind.BAD_REQUEST
        assert rpc_error.status == 400
        assert rpc_error.message == "Invalid data provided"

    def test_store_write_failure_is_sanitized_and_logged(self, caplog):
        cause = StoreWriteError("relation orders.orders does not exist")

        with caplog.at_level(logging.ERROR, logger="microservices.order_service.errors"):
            rpc_error = translate_error(cause, "create order")

        assert rpc_error.kind == ErrorKind.STORE_WRITE_FAILURE
        assert "relation" not in rpc_error.message
        assert "relation orders.orders does not exist" in caplog.text
        assert "create order" in caplog.text

    def test_unexpected_error_is_internal_and_logged_with_traceback(self, caplog):
        try:
            raise KeyError("secret")
        except KeyError as e:
            with caplog.at_level(logging.ERROR, logger="microservices.order_service.errors"):
                rpc_error = translate_error(e)

        assert rpc_error.kind == ErrorKind.INTERNAL_ERROR
        assert rpc_error.message == "Internal server error"
        assert caplog.records[-1].exc_info is not None
