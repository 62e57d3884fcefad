"""
Component Test Layer Configuration

Structure:
    tests/component/
    ├── order_service/   OrderService, handlers and clients with fakes
    └── mocks/           Mock implementations

Usage:
    pytest tests/component -v
    pytest tests/component/order_service -v
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports
os.environ["ENV"] = "testing"
os.environ["ENVIRONMENT"] = "testing"

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from tests.component.mocks import MockMessageBus


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "component: marks tests as component tests"
    )


# =============================================================================
# Messaging Mocks
# =============================================================================

@pytest.fixture
def mock_bus() -> MockMessageBus:
    """Mock NATS message bus"""
    return MockMessageBus()
