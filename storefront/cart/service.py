"""Cart store: owns cart state, applies reducer operations, persists snapshots."""
from typing import Callable, List, Optional

from storefront import config
from storefront.db import RedisKeys
from storefront.errors import CartStorageError, ERROR_INSUFFICIENT_STOCK, REASON_INSUFFICIENT_STOCK
from storefront.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from .models import CartItem, CartState, Product
from .reducer import (
    AddItem,
    AddToCart,
    CartResult,
    Clear,
    Close,
    Decrement,
    Increment,
    Open,
    Operation,
    RemoveItem,
    SetNotes,
    SetQuantity,
    Toggle,
    reduce,
)
from .storage import CartStorage, InMemoryCartStorage, RedisCartStorage, deserialize_snapshot, serialize_snapshot
from .summary import CartSummary, build_cart_summary

logger = get_logger(__name__)

Listener = Callable[[CartState], None]


def _operation_product_id(operation: Operation):
    product = getattr(operation, "product", None)
    if product is not None:
        return product.id
    return getattr(operation, "product_id", None)


class CartStore:
    """
    Shopping cart state container.

    Features:
    - Stock-guarded adds and increments (reported as bool, never raised)
    - Snapshot written to the injected storage after every item change
    - Listeners notified with the new state after every change

    Usage:
        store = CartStore(storage=InMemoryCartStorage())
        if not store.add_to_cart(product, 2):
            show_out_of_stock_warning()
        store.get_cart_summary().total_formatted
    """

    def __init__(
        self,
        storage: Optional[CartStorage] = None,
        storage_key: Optional[str] = None,
        max_quantity: Optional[int] = None,
    ):
        self.storage = storage if storage is not None else InMemoryCartStorage()
        self.storage_key = storage_key or RedisKeys.cart_key()
        self.max_quantity = config.CART_MAX_QUANTITY if max_quantity is None else max_quantity
        self._listeners: List[Listener] = []
        self._state = CartState(items=self._restore())

    # State

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def items(self):
        return self._state.items

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    @property
    def item_count(self) -> int:
        return self._state.item_count

    @property
    def subtotal(self):
        return self._state.subtotal

    @property
    def total(self):
        return self._state.total

    @property
    def is_empty(self) -> bool:
        return self._state.is_empty

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Operations

    def dispatch(self, operation: Operation) -> CartResult:
        """Apply an operation, then persist and notify if the state changed."""
        previous = self._state
        result = reduce(previous, operation, max_quantity=self.max_quantity)

        if not result.accepted:
            if result.reason == REASON_INSUFFICIENT_STOCK:
                logger.warning(
                    f"{ERROR_INSUFFICIENT_STOCK}: {type(operation).__name__} rejected "
                    f"for product {sanitize_id_for_logging(_operation_product_id(operation))}"
                )
            return result

        if result.state == previous:
            return result

        self._state = result.state
        if result.state.items != previous.items:
            self._persist()
        for listener in list(self._listeners):
            listener(self._state)
        return result

    def add_item(self, product: Product, quantity: int = 1, notes: Optional[str] = None) -> None:
        """Add without a stock check. User-facing adds go through add_to_cart."""
        self.dispatch(AddItem(product=product, quantity=quantity, notes=notes))

    def add_to_cart(self, product: Product, quantity: int = 1, notes: Optional[str] = None) -> bool:
        """Add with stock validation. Returns False and leaves the cart unchanged on insufficient stock."""
        return self.dispatch(AddToCart(product=product, quantity=quantity, notes=notes)).accepted

    def remove_item(self, product_id: int) -> None:
        self.dispatch(RemoveItem(product_id=product_id))

    def update_quantity(self, product_id: int, quantity: int) -> None:
        """Set a line's quantity without a stock check. Zero or below removes the line."""
        self.dispatch(SetQuantity(product_id=product_id, quantity=quantity))

    def increment_quantity(self, product_id: int) -> bool:
        return self.dispatch(Increment(product_id=product_id)).accepted

    def decrement_quantity(self, product_id: int) -> bool:
        return self.dispatch(Decrement(product_id=product_id)).accepted

    def update_notes(self, product_id: int, notes: Optional[str]) -> None:
        logger.debug(f"Notes for product {sanitize_id_for_logging(product_id)}: {sanitize_string_for_logging(notes)}")
        self.dispatch(SetNotes(product_id=product_id, notes=notes))

    def clear_cart(self) -> None:
        self.dispatch(Clear())

    def open_cart(self) -> None:
        self.dispatch(Open())

    def close_cart(self) -> None:
        self.dispatch(Close())

    def toggle_cart(self) -> None:
        self.dispatch(Toggle())

    # Queries

    def is_in_cart(self, product_id: int) -> bool:
        return self._state.find(product_id) is not None

    def get_item_quantity(self, product_id: int) -> int:
        item = self._state.find(product_id)
        return item.quantity if item else 0

    def get_item(self, product_id: int) -> Optional[CartItem]:
        return self._state.find(product_id)

    def get_cart_summary(self) -> CartSummary:
        return build_cart_summary(self._state)

    # Persistence

    def reload(self) -> None:
        """Re-read the stored snapshot, as on a restart. The drawer starts closed."""
        self._state = CartState(items=self._restore())
        for listener in list(self._listeners):
            listener(self._state)

    def _restore(self) -> List[CartItem]:
        try:
            payload = self.storage.load(self.storage_key)
        except CartStorageError as e:
            logger.warning(f"Starting with an empty cart: {e}")
            return []
        return deserialize_snapshot(payload)

    def _persist(self) -> None:
        try:
            if self._state.items:
                self.storage.save(self.storage_key, serialize_snapshot(self._state.items))
            else:
                self.storage.delete(self.storage_key)
        except CartStorageError as e:
            # The in-memory cart stays authoritative; the next change retries the write
            logger.error(f"Cart snapshot not persisted: {e}")


def build_cart_store(session_id: Optional[str] = None, storage: Optional[CartStorage] = None) -> CartStore:
    """
    Build the cart store for one browsing session.

    Uses Redis when Upstash credentials are configured, otherwise keeps
    the snapshot in process memory.
    """
    if storage is None:
        if config.redis_configured():
            storage = RedisCartStorage()
        else:
            logger.info("Upstash Redis not configured, cart snapshots kept in memory")
            storage = InMemoryCartStorage()
    return CartStore(storage=storage, storage_key=RedisKeys.cart_key(session_id))
