"""Cart package: models, reducer, storage, and store facade."""
from .models import Product, CartItem, CartState, calculate_cart_totals
from .reducer import CartResult, reduce
from .service import CartStore, build_cart_store
from .storage import InMemoryCartStorage, RedisCartStorage
from .summary import CartSummary, build_cart_summary

__all__ = [
    "Product",
    "CartItem",
    "CartState",
    "calculate_cart_totals",
    "CartResult",
    "reduce",
    "CartStore",
    "build_cart_store",
    "InMemoryCartStorage",
    "RedisCartStorage",
    "CartSummary",
    "build_cart_summary",
]
