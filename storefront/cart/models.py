"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from storefront.services.money import to_decimal, subtract, multiply


class Product(BaseModel):
    """
    Product snapshot supplied by the catalog.

    The cart keeps this copy as it was at add time and never refreshes it.
    """
    id: int
    price: Decimal = Field(ge=0)
    compare_price: Optional[Decimal] = None  # "was" price, display only
    stock: int = Field(ge=0)
    name: Optional[str] = None
    slug: Optional[str] = None
    thumbnail: Optional[str] = None

    class Config:
        extra = "ignore"  # Catalog payloads carry many more fields
        frozen = True

    @field_validator("price", mode="before")
    @classmethod
    def convert_price(cls, v):
        if isinstance(v, float):
            return to_decimal(v)
        return v

    @field_validator("compare_price", mode="before")
    @classmethod
    def convert_compare_price(cls, v):
        # None means "no compare price"; 0 is a real value
        if v is None or not isinstance(v, float):
            return v
        return to_decimal(v)

    @property
    def unit_discount(self) -> Decimal:
        """Per-unit discount when compare_price is above price."""
        if self.compare_price is not None and self.compare_price > self.price:
            return subtract(self.compare_price, self.price)
        return Decimal("0")


@dataclass(frozen=True)
class CartItem:
    """Single line in the cart."""
    product: Product
    quantity: int
    notes: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        """Price for all units."""
        return multiply(self.product.price, self.quantity)

    @property
    def discount(self) -> Decimal:
        """Display-only saving versus compare_price for all units."""
        return multiply(self.product.unit_discount, self.quantity)

    def max_quantity(self, hard_cap: int) -> int:
        """Largest quantity the guarded operations allow for this line."""
        return min(self.product.stock, hard_cap)

    def to_dict(self) -> dict:
        """Convert to dictionary for snapshot storage."""
        return {
            "product": self.product.model_dump(mode="json", exclude_unset=True),
            "quantity": self.quantity,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        """Create from dictionary. Raises on malformed data."""
        quantity = data["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError("quantity must be a positive integer")
        notes = data.get("notes")
        if notes is not None and not isinstance(notes, str):
            raise TypeError("notes must be a string")
        return cls(
            product=Product.model_validate(data["product"]),
            quantity=quantity,
            notes=notes,
        )


@dataclass(frozen=True)
class CartTotals:
    """Aggregates derived from the item list."""
    item_count: int
    subtotal: Decimal
    total: Decimal


def calculate_cart_totals(items: Iterable[CartItem]) -> CartTotals:
    """Recompute item count, subtotal and total from the items."""
    item_count = 0
    subtotal = Decimal("0")
    for item in items:
        item_count += item.quantity
        subtotal += item.line_total

    # Shipping, tax and discounts are display-only for now
    total = subtotal

    return CartTotals(item_count=item_count, subtotal=subtotal, total=total)


@dataclass(frozen=True)
class CartState:
    """
    Immutable cart snapshot.

    item_count, subtotal and total are computed from items on construction
    and cannot be passed in, so they always agree with the item list.
    """
    items: Tuple[CartItem, ...] = ()
    is_open: bool = False
    item_count: int = field(init=False)
    subtotal: Decimal = field(init=False)
    total: Decimal = field(init=False)

    def __post_init__(self):
        items = tuple(self.items)
        totals = calculate_cart_totals(items)
        object.__setattr__(self, "items", items)
        object.__setattr__(self, "item_count", totals.item_count)
        object.__setattr__(self, "subtotal", totals.subtotal)
        object.__setattr__(self, "total", totals.total)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, product_id: int) -> Optional[CartItem]:
        return next((item for item in self.items if item.product.id == product_id), None)

    def with_items(self, items: Iterable[CartItem]) -> "CartState":
        return replace(self, items=tuple(items))

    def with_open(self, is_open: bool) -> "CartState":
        return replace(self, is_open=is_open)
