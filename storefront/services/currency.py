"""Currency symbols for the currencies a storefront cart can be priced in."""

from typing import Dict

# CART_CURRENCY must be one of these to get a symbol; other codes print as-is
CURRENCY_SYMBOLS: Dict[str, str] = {
    "CUP": "$",
    "USD": "$",
    "MXN": "$",
    "EUR": "€",
}
