"""
Common Error Constants

Centralized error messages to avoid string duplication.
"""

# Rejection reasons reported by guarded cart operations
REASON_INSUFFICIENT_STOCK = "insufficient_stock"
REASON_NOT_IN_CART = "not_in_cart"

# Messages
ERROR_INSUFFICIENT_STOCK = "Insufficient stock"
ERROR_CART_STORAGE_UNAVAILABLE = "Cart storage unavailable"
ERROR_CART_SNAPSHOT_CORRUPTED = "Corrupted cart snapshot"


class CartStorageError(ValueError):
    """Raised by a storage backend when a snapshot cannot be read or written."""
