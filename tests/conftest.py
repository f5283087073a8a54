"""
Pytest configuration and shared fixtures for the product catalog.

This module provides common test fixtures used across unit and integration
tests: an in-memory SQLite pool standing in for Oracle, moto-backed DynamoDB
tables, API Gateway events and a Lambda context.
"""

import json
import os

# Powertools objects are created at import time, configure them first
os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "AWS_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "test",
    "AWS_SECRET_ACCESS_KEY": "test",
    "AUDIT_TABLE": "test-audit-trail",
    "CONFIG_TABLE": "test-app-configs",
    "DATABASE_URL": "sqlite://",
    "POWERTOOLS_SERVICE_NAME": "test-product-catalog",
    "POWERTOOLS_METRICS_NAMESPACE": "TestProductCatalog",
    "POWERTOOLS_TRACE_DISABLED": "true",
    "LOG_LEVEL": "DEBUG",
})

from decimal import Decimal
from typing import Any, Dict, Optional
from unittest.mock import Mock, patch

import boto3
import pytest
from moto import mock_aws
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from catalog.handlers.models.env_vars import CatalogEnvVars
from catalog.handlers.utils.app_context import AppContext
from catalog.models.product import Product, ProductStatus

PRODUCTS_DDL = """
CREATE TABLE products (
    id VARCHAR(36) PRIMARY KEY,
    name VARCHAR(100) NOT NULL,
    price NUMERIC(12, 2) NOT NULL,
    status VARCHAR(16) NOT NULL,
    category VARCHAR(16),
    description VARCHAR(500),
    created_at VARCHAR(40) NOT NULL,
    updated_at VARCHAR(40) NOT NULL
)
"""

PRODUCT_PRICES_DDL = """
CREATE TABLE product_prices (
    product_id VARCHAR(36) PRIMARY KEY,
    price NUMERIC(12, 2) NOT NULL,
    currency VARCHAR(3) NOT NULL
)
"""


# Relational fixtures
@pytest.fixture
def sqlite_pool():
    """In-memory SQLite engine shared by every checkout (StaticPool)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with engine.begin() as connection:
        connection.execute(text(PRODUCTS_DDL))
        connection.execute(text(PRODUCT_PRICES_DDL))
    yield engine
    engine.dispose()


class CountingPool:
    """Pool wrapper recording every checked-out session so tests can count closes."""

    def __init__(self, engine):
        self.engine = engine
        self.sessions = []

    def connect(self):
        session = Mock(wraps=self.engine.connect())
        self.sessions.append(session)
        return session


@pytest.fixture
def counting_pool(sqlite_pool):
    return CountingPool(sqlite_pool)


# DynamoDB fixtures
@pytest.fixture
def dynamodb_tables():
    """Create mock audit and config tables."""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

        audit_table = dynamodb.create_table(
            TableName="test-audit-trail",
            KeySchema=[
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "PK", "AttributeType": "S"},
                {"AttributeName": "SK", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        config_table = dynamodb.create_table(
            TableName="test-app-configs",
            KeySchema=[
                {"AttributeName": "pk", "KeyType": "HASH"},
                {"AttributeName": "sk", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "pk", "AttributeType": "S"},
                {"AttributeName": "sk", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        audit_table.wait_until_exists()
        config_table.wait_until_exists()
        yield audit_table, config_table


@pytest.fixture
def app_context(counting_pool, dynamodb_tables):
    """Application context wired to SQLite and moto."""
    audit_table, config_table = dynamodb_tables
    return AppContext(
        settings=CatalogEnvVars(),
        pool=counting_pool,
        audit_table=audit_table,
        config_table=config_table,
    )


@pytest.fixture
def patched_app_context(app_context):
    """Make every handler use the test application context."""
    with patch("catalog.handlers.products_handler.get_app_context", return_value=app_context), \
            patch("catalog.handlers.price_handler.get_app_context", return_value=app_context), \
            patch("catalog.handlers.config_handler.get_app_context", return_value=app_context):
        yield app_context


# Sample data fixtures
@pytest.fixture
def sample_product() -> Product:
    return Product(
        id="6f1c2b1e-3a57-4a5c-9a43-2f7e5f0b9a10",
        name="Widget",
        price=Decimal("9.99"),
        status=ProductStatus.ACTIVE,
        created_at="2026-01-15T10:30:00.000+00:00",
        updated_at="2026-01-15T10:30:00.000+00:00",
    )


@pytest.fixture
def deleted_product(sample_product) -> Product:
    return sample_product.model_copy(update={"status": ProductStatus.DELETED})


@pytest.fixture
def make_event():
    """Build API Gateway REST proxy events."""

    def _make_event(
        method: str,
        path: str = "/product",
        body: Any = None,
        query: Optional[Dict[str, str]] = None,
        user: Optional[str] = "user-123",
    ) -> Dict[str, Any]:
        request_context = {
            "requestId": "test-request-id-123",
            "accountId": "123456789012",
            "stage": "test",
            "httpMethod": method,
            "path": path,
            "resourcePath": path,
            "identity": {"sourceIp": "127.0.0.1", "userAgent": "test-agent/1.0"},
        }
        if user:
            request_context["authorizer"] = {"claims": {"sub": user}}

        return {
            "resource": path,
            "path": path,
            "httpMethod": method,
            "headers": {"Content-Type": "application/json", "User-Agent": "test-agent/1.0"},
            "multiValueHeaders": {"Content-Type": ["application/json"], "User-Agent": ["test-agent/1.0"]},
            "queryStringParameters": query,
            "multiValueQueryStringParameters": {k: [v] for k, v in query.items()} if query else None,
            "pathParameters": None,
            "stageVariables": None,
            "requestContext": request_context,
            "body": json.dumps(body) if isinstance(body, (dict, list)) else body,
            "isBase64Encoded": False,
        }

    return _make_event


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-lambda-function"
    context.function_version = "1"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-lambda-function"
    context.memory_limit_in_mb = 512
    context.get_remaining_time_in_millis = lambda: 30000
    context.aws_request_id = "test-request-id-123"
    context.log_group_name = "/aws/lambda/test-lambda-function"
    context.log_stream_name = "2026/01/01/[$LATEST]test123"
    return context


@pytest.fixture
def integration_client():
    """HTTP client for a deployed stage, skipped unless API_BASE_URL is set."""
    import httpx

    base_url = os.environ.get("API_BASE_URL")
    if not base_url:
        pytest.skip("API_BASE_URL not set")

    with httpx.Client(base_url=base_url, timeout=30.0) as client:
        yield client


# Pytest configuration
def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "e2e" in str(item.fspath):
            item.add_marker(pytest.mark.e2e)
