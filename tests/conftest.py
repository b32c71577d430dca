"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import Mock

# Keep tests off any real Redis and pin cart settings
os.environ["UPSTASH_REDIS_REST_URL"] = ""
os.environ["UPSTASH_REDIS_REST_TOKEN"] = ""
os.environ.setdefault("CART_MAX_QUANTITY", "99")
os.environ.setdefault("CART_FREE_SHIPPING_THRESHOLD", "50")
os.environ.setdefault("CART_CURRENCY", "CUP")

from storefront.cart import CartStore, InMemoryCartStorage, Product  # noqa: E402


@pytest.fixture
def make_product():
    """Factory for product snapshots"""
    def _make(id=1, price="10", stock=5, compare_price=None, **extra):
        return Product(id=id, price=price, stock=stock, compare_price=compare_price, **extra)
    return _make


@pytest.fixture
def sample_product_data():
    """Sample catalog payload, as the catalog API returns it"""
    return {
        "id": 1,
        "name": "Café Serrano 250g",
        "slug": "cafe-serrano-250g",
        "description": "Ground coffee",
        "price": 10.0,
        "compare_price": 15.0,
        "sku": "CAF-250",
        "stock": 5,
        "min_stock": 1,
        "category": "Bebidas",
        "images": [],
        "tags": [],
        "is_active": True,
    }


@pytest.fixture
def memory_storage():
    """Fresh in-memory snapshot storage"""
    return InMemoryCartStorage()


@pytest.fixture
def store(memory_storage):
    """Cart store backed by in-memory storage"""
    return CartStore(storage=memory_storage)


@pytest.fixture
def mock_redis_client():
    """Mock Upstash Redis client"""
    client = Mock()
    client.get.return_value = None
    client.set.return_value = True
    client.delete.return_value = 1
    return client
