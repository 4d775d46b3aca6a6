"""
Pytest configuration and shared fixtures for the Plaid proxy.

This module provides common test fixtures and configuration used across
unit, integration, and end-to-end tests.
"""

import json
import os
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import Mock

import httpx
import pytest

from plaid_proxy.dal.plaid_client import PlaidClient, PlaidEnvironment
from plaid_proxy.handlers import proxy_handler
from plaid_proxy.handlers.utils.observability import metrics
from plaid_proxy.logic.dispatcher import Dispatcher
from plaid_proxy.logic.registry import Operation


# Test environment configuration
@pytest.fixture(scope="session", autouse=True)
def test_environment():
    """Set up test environment variables."""
    os.environ.update({
        "AWS_DEFAULT_REGION": "us-east-1",
        "PLAID_CLIENT_ID": "test-client-id",
        "PLAID_SECRET": "test-secret",
        "PLAID_ENVIRONMENT": "sandbox",
        "POWERTOOLS_SERVICE_NAME": "test-plaid-proxy",
        "POWERTOOLS_METRICS_NAMESPACE": "TestPlaidProxy",
        "LOG_LEVEL": "DEBUG",
        "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    })


@pytest.fixture
def api_gateway_event() -> Callable[..., Dict[str, Any]]:
    """Factory for API Gateway REST proxy events."""

    def make_event(
        path: str,
        method: str = "POST",
        body: Optional[str] = None,
        query: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        return {
            "resource": path,
            "path": path,
            "httpMethod": method,
            "headers": {
                "Content-Type": "application/json",
                "User-Agent": "test-agent/1.0",
            },
            "multiValueHeaders": {},
            "queryStringParameters": query,
            "multiValueQueryStringParameters": (
                {key: [value] for key, value in query.items()} if query else None
            ),
            "pathParameters": None,
            "stageVariables": None,
            "body": body,
            "isBase64Encoded": False,
            "requestContext": {
                "requestId": "test-request-id-123",
                "accountId": "123456789012",
                "stage": "test",
                "httpMethod": method,
                "path": path,
                "protocol": "HTTP/1.1",
                "requestTimeEpoch": 1704110400000,
                "identity": {
                    "sourceIp": "127.0.0.1",
                    "userAgent": "test-agent/1.0",
                },
            },
        }

    return make_event


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-plaid-proxy"
    context.function_version = "1"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-plaid-proxy"
    context.memory_limit_in_mb = 512
    context.aws_request_id = "test-request-id-123"
    context.log_group_name = "/aws/lambda/test-plaid-proxy"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    context.get_remaining_time_in_millis.return_value = 30000
    return context


@pytest.fixture
def transactions_result() -> Dict[str, Any]:
    """A /transactions/get style result."""
    return {
        "accounts": [{"account_id": "acc-1", "name": "Checking"}],
        "transactions": [
            {"transaction_id": "txn-1", "amount": 12.5, "date": "2020-01-03"},
            {"transaction_id": "txn-2", "amount": 40.0, "date": "2020-01-15"},
        ],
        "total_transactions": 2,
        "request_id": "req-123",
    }


@pytest.fixture
def operation_handlers(transactions_result) -> Dict[Operation, Mock]:
    """Mock handlers for a few operations, keyed like a client's operation table."""
    return {
        Operation.GET_TRANSACTIONS: Mock(return_value=transactions_result),
        Operation.GET_CATEGORIES: Mock(return_value={"categories": [], "request_id": "req-cat"}),
        Operation.GET_ITEM: Mock(return_value={"item": {"item_id": "item-1"}}),
        Operation.CREATE_PAYMENT: Mock(return_value={"payment_id": "pay-1", "status": "PAYMENT_STATUS_INPUT_NEEDED"}),
    }


@pytest.fixture
def dispatcher(operation_handlers) -> Dispatcher:
    return Dispatcher(operation_handlers)


@pytest.fixture
def installed_dispatcher(dispatcher, monkeypatch) -> Dispatcher:
    """Install a dispatcher as the handler's process-wide instance."""
    monkeypatch.setattr(proxy_handler, "_dispatcher", dispatcher)
    return dispatcher


class PlaidStub:
    """Records requests sent to Plaid and answers them from a route table."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.routes: Dict[str, Callable[[Dict[str, Any]], httpx.Response]] = {}

    def respond(self, path: str, payload: Any = None, status_code: int = 200) -> None:
        self.routes[path] = lambda body: httpx.Response(status_code, json=payload)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={
                "error_code": "NOT_FOUND",
                "error_type": "INVALID_REQUEST",
                "error_message": f"unexpected path {request.url.path}",
                "display_message": None,
            })
        return route(json.loads(request.content or b"{}"))

    @property
    def last_body(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def plaid_stub() -> PlaidStub:
    return PlaidStub()


@pytest.fixture
def plaid_client(plaid_stub):
    """Plaid client wired to the stub transport."""
    client = PlaidClient(
        client_id="test-client-id",
        secret="test-secret",
        environment=PlaidEnvironment.SANDBOX,
        transport=httpx.MockTransport(plaid_stub),
    )
    yield client
    client.close()


@pytest.fixture
def integration_client():
    """HTTP client for a deployed (or `sam local`) proxy API."""
    base_url = os.environ.get("API_BASE_URL")
    if not base_url:
        pytest.skip("API_BASE_URL is not set")

    with httpx.Client(base_url=base_url, timeout=30.0) as client:
        yield client


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line("markers", "benchmark: Performance benchmark tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "e2e" in str(item.fspath):
            item.add_marker(pytest.mark.e2e)
        elif "benchmark" in str(item.fspath):
            item.add_marker(pytest.mark.benchmark)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the process-wide dispatcher and buffered metrics between tests."""
    proxy_handler._dispatcher = None
    yield
    proxy_handler._dispatcher = None
    metrics.clear_metrics()
