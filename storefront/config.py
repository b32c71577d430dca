"""
Cart configuration.

All settings come from environment variables. A local ``.env`` file is
loaded first when python-dotenv finds one, so values exported in the shell
still take precedence.
"""

import os
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

_env_path = Path(__file__).resolve().parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)


def _get_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_decimal(name: str, default: str) -> Decimal:
    raw = os.environ.get(name, default)
    try:
        return Decimal(raw)
    except ArithmeticError:
        return Decimal(default)


# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

# Persistence key for the cart snapshot (same name the storefront used in local storage)
CART_STORAGE_KEY = os.environ.get("CART_STORAGE_KEY", "cart")

# UI ceiling per line item, independent of stock
CART_MAX_QUANTITY = _get_int("CART_MAX_QUANTITY", 99)

# Display-only shipping promo
CART_FREE_SHIPPING_THRESHOLD = _get_decimal("CART_FREE_SHIPPING_THRESHOLD", "50")

CART_CURRENCY = os.environ.get("CART_CURRENCY", "CUP")

# Abandoned carts expire after 24 hours in Redis
CART_TTL_SECONDS = _get_int("CART_TTL_SECONDS", 86400)


def redis_configured() -> bool:
    """True when both Upstash credentials are present."""
    return bool(UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN)
