"""
Storefront Cart Module

This package contains the shopping-cart core and its infrastructure:
- cart: cart store, pure reducer, models, persistence backends
- db: Upstash Redis client
- services: money and currency helpers
- config: environment-driven settings

Note: Imports are lazy so that importing the package does not
touch Redis or read configuration eagerly.
"""

__all__ = [
    "CartStore",
    "build_cart_store",
    "Product",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "CartStore":
        from storefront.cart import CartStore
        return CartStore
    if name == "build_cart_store":
        from storefront.cart import build_cart_store
        return build_cart_store
    if name == "Product":
        from storefront.cart import Product
        return Product
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
