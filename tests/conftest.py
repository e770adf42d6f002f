"""
Shared test fixtures and configuration for pytest.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


logger = logging.getLogger(__name__)


# ============================================================================
# Pytest hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (network or filesystem heavy)")


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by configure_logging() during a test."""
    package_logger = logging.getLogger("sync_trigger")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield
    for handler in list(package_logger.handlers):
        if handler not in handlers:
            package_logger.removeHandler(handler)
    package_logger.setLevel(level)


@pytest.fixture
def api_document() -> dict:
    """Minimal OpenAPI document with a list, a single-item and a create operation."""
    return {
        "openapi": "3.0.0",
        "info": {"title": "Items API", "version": "1.0"},
        "servers": [{"url": "https://api.example.com/v1"}],
        "paths": {
            "/items": {
                "get": {
                    "operationId": "listItems",
                    "parameters": [
                        {"name": "limit", "in": "query"},
                        {"name": "updated_since", "in": "query"},
                        {"name": "X-Tenant", "in": "header"},
                    ],
                },
                "post": {
                    "operationId": "createItem",
                    "requestBody": {
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Item"}
                            }
                        }
                    },
                },
            },
            "/items/{itemId}": {
                "parameters": [{"name": "itemId", "in": "path", "required": True}],
                "get": {"operationId": "getItem"},
            },
        },
        "components": {
            "schemas": {
                "Item": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string"},
                        "attachment": {"type": "string", "format": "binary"},
                    },
                }
            }
        },
    }


@pytest.fixture
def api_spec(api_document):
    """Parsed API document."""
    from sync_trigger.openapi import ApiSpec

    return ApiSpec(api_document, source="test")


@pytest.fixture
def sample_records() -> list:
    """Two records with ISO dates, oldest first."""
    return [
        {"id": 1, "updatedAt": "2024-01-01"},
        {"id": 2, "updatedAt": "2024-02-01"},
    ]


@pytest.fixture
def collecting_sink():
    """Fixture providing an in-memory sink."""
    from sync_trigger.sinks import CollectingSink

    return CollectingSink()


@pytest.fixture
def static_connector(sample_records):
    """Fixture providing a static connector serving the sample records."""
    from sync_trigger.connectors import StaticConnector

    connector = StaticConnector(payloads=[{"result": {"items": sample_records}}])
    yield connector
    connector.close()
