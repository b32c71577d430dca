"""Tests for the pure cart reducer"""
import pytest
from decimal import Decimal

from storefront.cart.models import CartState
from storefront.cart.reducer import (
    AddItem,
    AddToCart,
    Clear,
    Close,
    Decrement,
    Increment,
    Open,
    RemoveItem,
    SetNotes,
    SetQuantity,
    Toggle,
    add_item,
    reduce,
)
from storefront.errors import REASON_INSUFFICIENT_STOCK, REASON_NOT_IN_CART


@pytest.fixture
def one_line(make_product):
    """Cart holding 3 units of product 1 (price 10, stock 5)"""
    return add_item(CartState(), make_product(), 3)


def test_add_item_appends_new_line(make_product):
    state = add_item(CartState(), make_product(id=1), 2, "no onions")

    assert len(state.items) == 1
    assert state.items[0].quantity == 2
    assert state.items[0].notes == "no onions"
    assert state.item_count == 2


def test_add_item_merges_same_product(make_product):
    product = make_product(id=1)

    state = add_item(add_item(CartState(), product, 2), product, 4)

    assert len(state.items) == 1
    assert state.items[0].quantity == 6


def test_add_item_does_not_check_stock(make_product):
    """Unguarded add goes past stock on purpose."""
    state = add_item(CartState(), make_product(stock=1), 10)

    assert state.items[0].quantity == 10


@pytest.mark.parametrize("new_notes, expected", [
    ("ring the bell", "ring the bell"),
    (None, "original"),
    ("", "original"),
])
def test_add_item_notes_replaced_only_by_non_empty(make_product, new_notes, expected):
    product = make_product()
    state = add_item(CartState(), product, 1, "original")

    state = add_item(state, product, 1, new_notes)

    assert state.items[0].notes == expected


def test_add_item_keeps_original_snapshot(make_product):
    """The line keeps the snapshot captured on first add."""
    state = add_item(CartState(), make_product(price="10"), 1)

    state = add_item(state, make_product(price="12"), 1)

    assert state.items[0].product.price == Decimal("10")
    assert state.subtotal == Decimal("20")


@pytest.mark.parametrize("quantity", [0, -3])
def test_add_item_rejects_non_positive_quantity(make_product, quantity):
    with pytest.raises(ValueError):
        add_item(CartState(), make_product(), quantity)


def test_add_to_cart_within_stock(make_product):
    result = reduce(CartState(), AddToCart(product=make_product(stock=5), quantity=3))

    assert result.accepted
    assert result.state.item_count == 3
    assert result.state.subtotal == Decimal("30")


def test_add_to_cart_over_stock_returns_same_state(make_product, one_line):
    result = reduce(one_line, AddToCart(product=make_product(stock=5), quantity=3))

    assert not result.accepted
    assert result.reason == REASON_INSUFFICIENT_STOCK
    assert result.state is one_line


def test_add_to_cart_exactly_at_stock(make_product, one_line):
    result = reduce(one_line, AddToCart(product=make_product(stock=5), quantity=2))

    assert result.accepted
    assert result.state.items[0].quantity == 5


def test_add_to_cart_respects_hard_cap(make_product):
    product = make_product(stock=1000)

    result = reduce(CartState(), AddToCart(product=product, quantity=5), max_quantity=4)

    assert not result.accepted
    assert result.state.is_empty


def test_set_quantity_is_unguarded(one_line):
    result = reduce(one_line, SetQuantity(product_id=1, quantity=50))

    assert result.accepted
    assert result.state.items[0].quantity == 50


@pytest.mark.parametrize("quantity", [0, -1, -100])
def test_set_quantity_floor_removes_line(one_line, quantity):
    state = reduce(one_line, SetQuantity(product_id=1, quantity=quantity)).state

    assert state.find(1) is None
    assert state.item_count == 0
    assert state.subtotal == 0


def test_set_quantity_absent_is_noop(one_line):
    assert reduce(one_line, SetQuantity(product_id=99, quantity=2)).state is one_line


def test_remove_absent_is_noop(one_line):
    result = reduce(one_line, RemoveItem(product_id=99))

    assert result.accepted
    assert result.state is one_line


def test_remove_is_idempotent(one_line):
    once = reduce(one_line, RemoveItem(product_id=1)).state
    twice = reduce(once, RemoveItem(product_id=1)).state

    assert once == twice
    assert once.is_empty


def test_increment_until_stock(one_line):
    state = reduce(one_line, Increment(product_id=1)).state
    state = reduce(state, Increment(product_id=1)).state
    assert state.items[0].quantity == 5

    result = reduce(state, Increment(product_id=1))

    assert not result.accepted
    assert result.reason == REASON_INSUFFICIENT_STOCK
    assert result.state.items[0].quantity == 5


def test_increment_absent(one_line):
    result = reduce(one_line, Increment(product_id=42))

    assert not result.accepted
    assert result.reason == REASON_NOT_IN_CART


def test_decrement_to_zero_removes(make_product):
    state = add_item(CartState(), make_product(), 1)

    result = reduce(state, Decrement(product_id=1))

    assert result.accepted
    assert result.state.is_empty


def test_decrement(one_line):
    result = reduce(one_line, Decrement(product_id=1))

    assert result.accepted
    assert result.state.items[0].quantity == 2


def test_decrement_absent(one_line):
    assert not reduce(one_line, Decrement(product_id=42)).accepted


def test_set_notes_does_not_touch_totals(one_line):
    state = reduce(one_line, SetNotes(product_id=1, notes="")).state

    assert state.items[0].notes == ""
    assert state.subtotal == one_line.subtotal
    assert state.item_count == one_line.item_count


def test_set_notes_absent_is_noop(one_line):
    assert reduce(one_line, SetNotes(product_id=9, notes="x")).state is one_line


def test_clear(one_line):
    state = reduce(one_line.with_open(True), Clear()).state

    assert state.is_empty
    assert state.item_count == 0
    assert state.total == 0
    assert state.is_open is True


def test_clear_empty_cart():
    empty = CartState()

    assert reduce(empty, Clear()).state is empty


def test_visibility_operations_keep_items(one_line):
    opened = reduce(one_line, Open()).state
    assert opened.is_open
    assert opened.items == one_line.items

    closed = reduce(opened, Close()).state
    assert not closed.is_open

    toggled = reduce(closed, Toggle()).state
    assert toggled.is_open
    assert reduce(toggled, Toggle()).state.is_open is False


def test_reducer_does_not_mutate_input(one_line, make_product):
    before = (one_line.items, one_line.item_count, one_line.subtotal)

    reduce(one_line, AddItem(product=make_product(id=2), quantity=1))
    reduce(one_line, SetQuantity(product_id=1, quantity=0))
    reduce(one_line, Clear())

    assert (one_line.items, one_line.item_count, one_line.subtotal) == before


def test_unknown_operation():
    with pytest.raises(TypeError):
        reduce(CartState(), object())


def test_set_notes_unchanged_returns_same_state(make_product):
    state = add_item(CartState(), make_product(), 1, "gift")

    assert reduce(state, SetNotes(product_id=1, notes="gift")).state is state
