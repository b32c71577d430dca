"""Snapshot persistence for the cart: codec plus in-memory and Redis backends."""
import json
from typing import Dict, List, Optional, Protocol

from storefront.db import get_redis, TTL
from storefront.errors import (
    CartStorageError,
    ERROR_CART_SNAPSHOT_CORRUPTED,
    ERROR_CART_STORAGE_UNAVAILABLE,
)
from storefront.logging import get_logger, sanitize_id_for_logging
from .models import CartItem

logger = get_logger(__name__)


class CartStorage(Protocol):
    """Key-value port the cart store writes its snapshot to."""

    def load(self, key: str) -> Optional[str]: ...

    def save(self, key: str, payload: str) -> None: ...

    def delete(self, key: str) -> None: ...


def serialize_snapshot(items) -> str:
    """Only the items are persisted; is_open and totals are not."""
    return json.dumps({"items": [item.to_dict() for item in items]})


def deserialize_snapshot(payload: Optional[str]) -> List[CartItem]:
    """
    Parse a stored snapshot back into line items.

    Never raises: an absent or unparseable payload yields an empty list,
    malformed lines are dropped and repeated product ids are merged.
    """
    if not payload:
        return []

    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, TypeError, RecursionError) as e:
        logger.warning(f"{ERROR_CART_SNAPSHOT_CORRUPTED}: {e}")
        return []

    raw_items = data.get("items") if isinstance(data, dict) else None
    if not isinstance(raw_items, list):
        logger.warning(f"{ERROR_CART_SNAPSHOT_CORRUPTED}: missing items list")
        return []

    items: List[CartItem] = []
    positions: Dict[int, int] = {}
    for raw in raw_items:
        try:
            item = CartItem.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Dropping malformed cart line: {e}")
            continue

        index = positions.get(item.product.id)
        if index is None:
            positions[item.product.id] = len(items)
            items.append(item)
        else:
            first = items[index]
            items[index] = CartItem(
                product=first.product,
                quantity=first.quantity + item.quantity,
                notes=first.notes if first.notes is not None else item.notes,
            )
    return items


class InMemoryCartStorage:
    """Dict-backed storage. Default for tests and when Redis is not configured."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def save(self, key: str, payload: str) -> None:
        self.data[key] = payload

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class RedisCartStorage:
    """
    Upstash Redis storage.

    Snapshots are written with a TTL so abandoned carts expire.
    Client errors surface as CartStorageError.
    """

    def __init__(self, redis=None, ttl: int = TTL.CART):
        self._redis = redis  # Lazy initialization
        self.ttl = ttl

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            try:
                self._redis = get_redis()
            except ValueError as e:
                raise CartStorageError(f"Redis not available: {e}") from e
        return self._redis

    def load(self, key: str) -> Optional[str]:
        try:
            data = self.redis.get(key)
        except CartStorageError:
            raise
        except Exception as e:
            logger.error(f"Failed to read cart {sanitize_id_for_logging(key)} from Redis: {e}")
            raise CartStorageError(f"{ERROR_CART_STORAGE_UNAVAILABLE}: {e}") from e
        if isinstance(data, bytes):
            try:
                return data.decode("utf-8")
            except UnicodeDecodeError as e:
                logger.warning(f"{ERROR_CART_SNAPSHOT_CORRUPTED}: {e}")
                raise CartStorageError(f"{ERROR_CART_SNAPSHOT_CORRUPTED}: {e}") from e
        return data

    def save(self, key: str, payload: str) -> None:
        try:
            self.redis.set(key, payload, ex=self.ttl)
        except CartStorageError:
            raise
        except Exception as e:
            logger.error(f"Failed to save cart {sanitize_id_for_logging(key)} to Redis: {e}")
            raise CartStorageError(f"{ERROR_CART_STORAGE_UNAVAILABLE}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.redis.delete(key)
        except CartStorageError:
            raise
        except Exception as e:
            logger.error(f"Failed to clear cart {sanitize_id_for_logging(key)} from Redis: {e}")
            raise CartStorageError(f"{ERROR_CART_STORAGE_UNAVAILABLE}: {e}") from e
