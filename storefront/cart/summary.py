"""Display summary for the cart drawer and cart page."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from storefront import config
from storefront.services.money import divide, format_money, multiply, round_money, subtract, to_float
from .models import CartState

# Header badge shows "99+" past this count
BADGE_LIMIT = 99


@dataclass(frozen=True)
class CartSummary:
    item_count: int
    subtotal: Decimal
    total_discount: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal
    free_shipping_threshold: Decimal
    amount_for_free_shipping: Decimal
    free_shipping_progress: Decimal  # percent, 0-100
    currency: str

    @property
    def is_empty(self) -> bool:
        return self.item_count == 0

    @property
    def badge_label(self) -> str:
        if self.item_count > BADGE_LIMIT:
            return f"{BADGE_LIMIT}+"
        return str(self.item_count)

    @property
    def subtotal_formatted(self) -> str:
        return format_money(self.subtotal, self.currency)

    @property
    def total_formatted(self) -> str:
        return format_money(self.total, self.currency)

    @property
    def discount_formatted(self) -> str:
        return format_money(self.total_discount, self.currency)

    def to_dict(self) -> dict:
        return {
            "is_empty": self.is_empty,
            "item_count": self.item_count,
            "badge": self.badge_label,
            "subtotal": to_float(self.subtotal),
            "total_discount": to_float(self.total_discount),
            "shipping": to_float(self.shipping),
            "tax": to_float(self.tax),
            "total": to_float(self.total),
            "amount_for_free_shipping": to_float(self.amount_for_free_shipping),
            "free_shipping_progress": to_float(self.free_shipping_progress),
            "currency": self.currency,
            "subtotal_formatted": self.subtotal_formatted,
            "total_formatted": self.total_formatted,
        }


def build_cart_summary(
    state: CartState,
    free_shipping_threshold: Optional[Decimal] = None,
    currency: Optional[str] = None,
) -> CartSummary:
    """
    Summarize a cart state for display.

    Discount, shipping and tax are shown to the shopper but not taken off
    the total, which stays equal to the subtotal.
    """
    threshold = config.CART_FREE_SHIPPING_THRESHOLD if free_shipping_threshold is None else free_shipping_threshold
    total_discount = sum((item.discount for item in state.items), Decimal("0"))

    remaining = max(Decimal("0"), subtract(threshold, state.subtotal))
    if threshold <= 0:
        progress = Decimal("100")
    else:
        progress = min(Decimal("100"), multiply(divide(state.subtotal, threshold), 100))

    return CartSummary(
        item_count=state.item_count,
        subtotal=state.subtotal,
        total_discount=total_discount,
        shipping=Decimal("0"),
        tax=Decimal("0"),
        total=state.total,
        free_shipping_threshold=threshold,
        amount_for_free_shipping=remaining,
        free_shipping_progress=round_money(progress),
        currency=currency or config.CART_CURRENCY,
    )
