import pytest
from decimal import Decimal

from rest_framework.test import APIClient

from apps.exchange.infrastructure.stores.memory import InMemoryRateStore


@pytest.fixture
def api_client():
    """DRF API client."""
    return APIClient()


@pytest.fixture
def rate_store():
    """Empty in-memory rate store."""
    return InMemoryRateStore()


@pytest.fixture
def reference_store():
    """Store with the rates used across conversion scenarios."""
    return InMemoryRateStore({
        ("USD", "EUR"): Decimal("0.85"),
        ("EUR", "USD"): Decimal("1.18"),
        ("USD", "JPY"): Decimal("110.0"),
    })
