"""
Redis Client Module

Provides the Upstash Redis client used for cart snapshots.

Uses standard Upstash env var names:
- UPSTASH_REDIS_REST_URL
- UPSTASH_REDIS_REST_TOKEN
"""

from typing import Optional

from upstash_redis import Redis

from storefront import config

# Singleton instance
_redis_client: Optional[Redis] = None


def get_redis() -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    The cart writes its snapshot synchronously after every mutation,
    so the sync client is the one used here.
    """
    global _redis_client

    if _redis_client is None:
        if not config.redis_configured():
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = Redis(url=config.UPSTASH_REDIS_REST_URL, token=config.UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


# Redis key prefixes for organization
class RedisKeys:
    """Redis key prefixes for different data types."""

    @staticmethod
    def cart_key(session_id: Optional[str] = None) -> str:
        """cart, or cart:{session_id} when the host namespaces per session."""
        if session_id is None or session_id == "":
            return config.CART_STORAGE_KEY
        return f"{config.CART_STORAGE_KEY}:{session_id}"


# TTL constants (in seconds)
class TTL:
    """Time-to-live constants for Redis keys."""

    CART = config.CART_TTL_SECONDS
