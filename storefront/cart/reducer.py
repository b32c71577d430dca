"""
Pure cart reducer.

Every cart mutation is an operation value applied to an immutable
CartState. reduce() never touches storage and never mutates its input;
the store layers persistence and notification on top of it.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

from storefront import config
from storefront.errors import REASON_INSUFFICIENT_STOCK, REASON_NOT_IN_CART
from .models import CartItem, CartState, Product


@dataclass(frozen=True)
class AddItem:
    """Unguarded add: merges into an existing line without a stock check."""
    product: Product
    quantity: int = 1
    notes: Optional[str] = None


@dataclass(frozen=True)
class AddToCart:
    """Stock-guarded add."""
    product: Product
    quantity: int = 1
    notes: Optional[str] = None


@dataclass(frozen=True)
class RemoveItem:
    product_id: int


@dataclass(frozen=True)
class SetQuantity:
    product_id: int
    quantity: int


@dataclass(frozen=True)
class Increment:
    product_id: int


@dataclass(frozen=True)
class Decrement:
    product_id: int


@dataclass(frozen=True)
class SetNotes:
    product_id: int
    notes: Optional[str]


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class Open:
    pass


@dataclass(frozen=True)
class Close:
    pass


@dataclass(frozen=True)
class Toggle:
    pass


Operation = Union[
    AddItem, AddToCart, RemoveItem, SetQuantity, Increment, Decrement,
    SetNotes, Clear, Open, Close, Toggle,
]


@dataclass(frozen=True)
class CartResult:
    """Outcome of applying an operation. Rejected results carry the input state."""
    state: CartState
    accepted: bool = True
    reason: Optional[str] = None


def _validate_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValueError("quantity must be a positive integer")


def add_item(state: CartState, product: Product, quantity: int = 1, notes: Optional[str] = None) -> CartState:
    """Append a line or merge into the existing one for product.id."""
    _validate_quantity(quantity)

    existing = state.find(product.id)
    if existing is None:
        return state.with_items(state.items + (CartItem(product=product, quantity=quantity, notes=notes),))

    # Only a non-empty value replaces existing notes
    merged_notes = notes if notes is not None and notes != "" else existing.notes
    return state.with_items(
        CartItem(product=item.product, quantity=item.quantity + quantity, notes=merged_notes)
        if item.product.id == product.id else item
        for item in state.items
    )


def add_to_cart(
    state: CartState,
    product: Product,
    quantity: int = 1,
    notes: Optional[str] = None,
    max_quantity: Optional[int] = None,
) -> CartResult:
    """Guarded add: reject when the merged quantity would exceed stock or the per-line cap."""
    _validate_quantity(quantity)
    hard_cap = config.CART_MAX_QUANTITY if max_quantity is None else max_quantity

    current = state.find(product.id)
    new_quantity = (current.quantity if current else 0) + quantity
    if new_quantity > product.stock or new_quantity > hard_cap:
        return CartResult(state=state, accepted=False, reason=REASON_INSUFFICIENT_STOCK)

    return CartResult(state=add_item(state, product, quantity, notes))


def remove_item(state: CartState, product_id: int) -> CartState:
    if state.find(product_id) is None:
        return state
    return state.with_items(item for item in state.items if item.product.id != product_id)


def update_quantity(state: CartState, product_id: int, quantity: int) -> CartState:
    """Set quantity unconditionally; zero or below removes the line."""
    if quantity <= 0:
        return remove_item(state, product_id)
    if state.find(product_id) is None:
        return state
    return state.with_items(
        CartItem(product=item.product, quantity=quantity, notes=item.notes)
        if item.product.id == product_id else item
        for item in state.items
    )


def update_notes(state: CartState, product_id: int, notes: Optional[str]) -> CartState:
    item = state.find(product_id)
    if item is None or item.notes == notes:
        return state
    return state.with_items(
        CartItem(product=item.product, quantity=item.quantity, notes=notes)
        if item.product.id == product_id else item
        for item in state.items
    )


def increment_quantity(state: CartState, product_id: int, max_quantity: Optional[int] = None) -> CartResult:
    item = state.find(product_id)
    if item is None:
        return CartResult(state=state, accepted=False, reason=REASON_NOT_IN_CART)

    hard_cap = config.CART_MAX_QUANTITY if max_quantity is None else max_quantity
    if item.quantity + 1 > item.max_quantity(hard_cap):
        return CartResult(state=state, accepted=False, reason=REASON_INSUFFICIENT_STOCK)

    return CartResult(state=update_quantity(state, product_id, item.quantity + 1))


def decrement_quantity(state: CartState, product_id: int) -> CartResult:
    item = state.find(product_id)
    if item is None:
        return CartResult(state=state, accepted=False, reason=REASON_NOT_IN_CART)
    # update_quantity removes the line when this reaches zero
    return CartResult(state=update_quantity(state, product_id, item.quantity - 1))


def clear_cart(state: CartState) -> CartState:
    if not state.items:
        return state
    return state.with_items(())


def reduce(state: CartState, operation: Operation, max_quantity: Optional[int] = None) -> CartResult:
    """Apply one operation and return the resulting state."""
    handler = _HANDLERS.get(type(operation))
    if handler is None:
        raise TypeError(f"Unknown cart operation: {type(operation).__name__}")
    return handler(state, operation, max_quantity)


def _accepted(new_state: CartState) -> CartResult:
    return CartResult(state=new_state)


_HANDLERS: Dict[type, Callable[[CartState, Operation, Optional[int]], CartResult]] = {
    AddItem: lambda s, op, cap: _accepted(add_item(s, op.product, op.quantity, op.notes)),
    AddToCart: lambda s, op, cap: add_to_cart(s, op.product, op.quantity, op.notes, max_quantity=cap),
    RemoveItem: lambda s, op, cap: _accepted(remove_item(s, op.product_id)),
    SetQuantity: lambda s, op, cap: _accepted(update_quantity(s, op.product_id, op.quantity)),
    Increment: lambda s, op, cap: increment_quantity(s, op.product_id, max_quantity=cap),
    Decrement: lambda s, op, cap: decrement_quantity(s, op.product_id),
    SetNotes: lambda s, op, cap: _accepted(update_notes(s, op.product_id, op.notes)),
    Clear: lambda s, op, cap: _accepted(clear_cart(s)),
    Open: lambda s, op, cap: _accepted(s if s.is_open else s.with_open(True)),
    Close: lambda s, op, cap: _accepted(s.with_open(False) if s.is_open else s),
    Toggle: lambda s, op, cap: _accepted(s.with_open(not s.is_open)),
}
