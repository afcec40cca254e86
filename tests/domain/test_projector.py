"""Unit tests for folding events into cart state and the read model."""

import random
from decimal import Decimal

import pytest

from shopcart.domain.decider import CartDecider
from shopcart.domain.exceptions import DomainException, InvariantViolation
from shopcart.domain.model.cart_state import CartStatus, Closed, Empty, Pending
from shopcart.domain.model.commands import AddProduct, Cancel, Confirm, RemoveProduct
from shopcart.domain.model.events import (
    Cancelled,
    Confirmed,
    Opened,
    ProductAdded,
    ProductRemoved,
)
from shopcart.domain.model.shopping_cart import to_state
from shopcart.domain.model.value_objects import PricedProductItem, ProductItem
from shopcart.domain.projector import evolve, fold, project
from tests.fakes import T0, FixedClock, FixedPriceCalculator

PRICE = Decimal("9.99")


def _item(qty: int, price: Decimal = PRICE, product_id: str = "P") -> PricedProductItem:
    return PricedProductItem(product_id, qty, price)


def _opened() -> Opened:
    return Opened("cart-1", "C", T0)


class TestEvolve:

    def test_opened_starts_an_empty_pending_cart(self):
        assert evolve(Empty(), _opened()) == Pending(lines={}, client_id="C", opened_at=T0)

    def test_scenario_open_and_add(self):
        state = fold([_opened(), ProductAdded("cart-1", _item(10), T0)])
        assert state == Pending(lines={("P", PRICE): 10}, client_id="C", opened_at=T0)

    def test_merge_law(self):
        state = fold(
            [
                _opened(),
                ProductAdded("cart-1", _item(3), T0),
                ProductAdded("cart-1", _item(4), T0),
            ]
        )
        assert state.lines == {("P", PRICE): 7}

    def test_same_product_at_new_price_is_a_new_line(self):
        state = fold(
            [
                _opened(),
                ProductAdded("cart-1", _item(3), T0),
                ProductAdded("cart-1", _item(1, Decimal("10.49")), T0),
            ]
        )
        assert state.lines == {("P", PRICE): 3, ("P", Decimal("10.49")): 1}

    def test_partial_removal_decrements(self):
        state = fold(
            [
                _opened(),
                ProductAdded("cart-1", _item(10), T0),
                ProductRemoved("cart-1", _item(5), T0),
            ]
        )
        assert state.lines == {("P", PRICE): 5}

    def test_full_removal_deletes_the_line(self):
        state = fold(
            [
                _opened(),
                ProductAdded("cart-1", _item(5), T0),
                ProductRemoved("cart-1", _item(5), T0),
            ]
        )
        assert state.lines == {}

    def test_confirmed_closes_the_cart(self):
        state = fold([_opened(), ProductAdded("cart-1", _item(1), T0), Confirmed("cart-1", "C2", T0)])
        assert state == Closed(CartStatus.CONFIRMED, T0, "C2")

    def test_cancelled_closes_the_cart(self):
        state = fold([_opened(), Cancelled("cart-1", T0)])
        assert state == Closed(CartStatus.CANCELLED, T0, "C")

    def test_evolve_returns_a_new_state(self):
        before = fold([_opened(), ProductAdded("cart-1", _item(1), T0)])
        evolve(before, ProductAdded("cart-1", _item(1), T0))
        assert before.lines == {("P", PRICE): 1}


class TestEvolveRejectsCorruptHistory:

    @pytest.mark.parametrize(
        "events",
        [
            [ProductAdded("cart-1", _item(1), T0)],
            [_opened(), _opened()],
            [_opened(), Cancelled("cart-1", T0), ProductAdded("cart-1", _item(1), T0)],
            [_opened(), Confirmed("cart-1", "C", T0), Cancelled("cart-1", T0)],
            [_opened(), ProductRemoved("cart-1", _item(1), T0)],
            [_opened(), ProductAdded("cart-1", _item(2), T0), ProductRemoved("cart-1", _item(3), T0)],
        ],
        ids=[
            "added-before-opened",
            "opened-twice",
            "added-after-cancel",
            "cancel-after-confirm",
            "removed-missing-line",
            "removed-too-many",
        ],
    )
    def test_illegal_event_raises(self, events):
        with pytest.raises(InvariantViolation):
            fold(events)

    def test_invariant_violation_is_not_a_domain_error(self):
        assert not issubclass(InvariantViolation, DomainException)


class TestProjectReadModel:

    def test_opened_creates_the_record(self):
        cart = project(None, _opened())
        assert cart.id == "cart-1"
        assert cart.status == CartStatus.PENDING
        assert cart.items == []
        assert cart.version == 1

    def test_lines_merge_and_shrink(self):
        cart = project(None, _opened())
        for event in [
            ProductAdded("cart-1", _item(3), T0),
            ProductAdded("cart-1", _item(2, Decimal("5.00"), "Q"), T0),
            ProductAdded("cart-1", _item(4), T0),
            ProductRemoved("cart-1", _item(5), T0),
        ]:
            cart = project(cart, event)

        assert cart.items == [_item(2), _item(2, Decimal("5.00"), "Q")]
        assert cart.item_count == 4
        assert str(cart.total) == "$29.98"
        assert cart.version == 5

    def test_confirm_records_client_and_time(self):
        cart = project(None, _opened())
        cart = project(cart, ProductAdded("cart-1", _item(1), T0))
        cart = project(cart, Confirmed("cart-1", "C2", T0))

        assert cart.status == CartStatus.CONFIRMED
        assert cart.client_id == "C2"
        assert cart.confirmed_at == T0
        assert cart.cancelled_at is None

    def test_cancel_records_cancel_time(self):
        cart = project(project(None, _opened()), Cancelled("cart-1", T0))
        assert cart.status == CartStatus.CANCELLED
        assert cart.cancelled_at == T0
        assert cart.confirmed_at is None

    def test_event_before_opened_rejected(self):
        with pytest.raises(InvariantViolation, match="before it was opened"):
            project(None, Cancelled("cart-1", T0))

    def test_event_for_another_cart_rejected(self):
        with pytest.raises(InvariantViolation, match="applied to cart"):
            project(project(None, _opened()), Cancelled("cart-2", T0))

    def test_event_after_close_rejected(self):
        cart = project(project(None, _opened()), Cancelled("cart-1", T0))
        with pytest.raises(InvariantViolation, match="CANCELLED status"):
            project(cart, ProductAdded("cart-1", _item(1), T0))

    def test_removing_missing_line_rejected(self):
        with pytest.raises(InvariantViolation, match="is not in cart"):
            project(project(None, _opened()), ProductRemoved("cart-1", _item(1), T0))

    def test_to_state_of_nothing_is_empty(self):
        assert to_state(None) == Empty()


def _random_command(rng: random.Random, state):
    products = ["P", "Q", "R"]
    roll = rng.random()
    if roll < 0.55 or isinstance(state, Empty):
        return AddProduct("cart-1", ProductItem(rng.choice(products), rng.randint(1, 4)), "C")
    if roll < 0.85 and isinstance(state, Pending) and state.lines:
        (product_id, price), held = rng.choice(sorted(state.lines.items()))
        return RemoveProduct("cart-1", PricedProductItem(product_id, rng.randint(1, held), price))
    if roll < 0.93:
        return Confirm("cart-1", "C")
    return Cancel("cart-1")


class TestFoldingDecidedHistories:

    @pytest.mark.parametrize("seed", range(25))
    def test_state_and_read_model_agree_with_last_terminal_command(self, seed):
        rng = random.Random(seed)
        decider = CartDecider(FixedPriceCalculator(PRICE), FixedClock())
        state, cart, history = Empty(), None, []
        terminal = None

        for _ in range(rng.randint(1, 15)):
            command = _random_command(rng, state)
            try:
                events = decider.decide(command, state)
            except DomainException:
                continue
            if isinstance(command, (Confirm, Cancel)) and isinstance(state, Pending):
                terminal = command
            for event in events:
                state = evolve(state, event)
                cart = project(cart, event)
            history.extend(events)

        assert fold(history) == state
        assert to_state(cart) == state
        if terminal is None:
            assert cart.status == CartStatus.PENDING
        elif isinstance(terminal, Confirm):
            assert cart.status == CartStatus.CONFIRMED
        else:
            assert cart.status == CartStatus.CANCELLED
        if isinstance(state, Pending):
            assert all(qty > 0 for qty in state.lines.values())

    @pytest.mark.parametrize("command", [Confirm("cart-1", "C"), Cancel("cart-1")])
    def test_closing_twice_changes_nothing(self, command):
        decider = CartDecider(FixedPriceCalculator(PRICE), FixedClock())
        state = fold([_opened(), ProductAdded("cart-1", _item(1), T0), Confirmed("cart-1", "C", T0)])

        events = decider.decide(command, state)

        assert events == []
        assert fold(events, state) == state
