"""Tests for the JSON-file repositories."""

import json
import threading
import time
from decimal import Decimal

import pytest

from shopcart.domain.decider import CartDecider
from shopcart.domain.exceptions import ConcurrencyConflict
from shopcart.domain.model.cart_state import CartStatus
from shopcart.domain.model.commands import AddProduct, Confirm
from shopcart.domain.model.events import ProductAdded
from shopcart.domain.model.product import Product
from shopcart.domain.model.value_objects import Money, PricedProductItem, ProductItem
from shopcart.infrastructure.persistence import json_cart_repository
from shopcart.infrastructure.persistence.json_cart_repository import JsonCartRepository
from shopcart.infrastructure.persistence.json_product_repository import JsonProductRepository
from tests.fakes import T0, FixedClock, FixedPriceCalculator


@pytest.fixture
def repo(tmp_path):
    return JsonCartRepository(tmp_path / "data" / "carts.json")


def _decide(command):
    decider = CartDecider(FixedPriceCalculator("9.99"), FixedClock())
    return lambda state: decider.decide(command, state)


class TestJsonCartRepository:

    def test_creates_empty_file(self, tmp_path, repo):
        raw = json.loads((tmp_path / "data" / "carts.json").read_text())
        assert raw == {"carts": {}, "events": {}}
        assert repo.find("cart-1") is None
        assert repo.events_for("cart-1") == []

    def test_round_trip_projection_and_events(self, tmp_path, repo):
        repo.get_and_apply("cart-1", _decide(AddProduct("cart-1", ProductItem("P", 2), "C")))
        repo.get_and_apply("cart-1", _decide(AddProduct("cart-1", ProductItem("P", 1))))
        repo.get_and_apply("cart-1", _decide(Confirm("cart-1")))

        reloaded = JsonCartRepository(tmp_path / "data" / "carts.json")
        cart = reloaded.find("cart-1")

        assert cart.status == CartStatus.CONFIRMED
        assert cart.client_id == "C"
        assert cart.items == [PricedProductItem("P", 3, Decimal("9.99"))]
        assert cart.opened_at == T0
        assert cart.confirmed_at == T0
        assert cart.version == 4
        assert len(reloaded.events_for("cart-1")) == 4
        assert reloaded.load_state("cart-1") == reloaded.replay_state("cart-1")

    def test_stale_version_rejected_and_nothing_written(self, tmp_path, repo):
        events = repo.get_and_apply("cart-1", _decide(AddProduct("cart-1", ProductItem("P", 2))))
        cart = repo.find("cart-1")
        before = (tmp_path / "data" / "carts.json").read_text()

        with pytest.raises(ConcurrencyConflict, match="expected version 0"):
            repo.store("cart-1", 0, cart, events)

        assert (tmp_path / "data" / "carts.json").read_text() == before

    def test_no_events_no_write(self, tmp_path, repo):
        repo.get_and_apply("cart-1", _decide(AddProduct("cart-1", ProductItem("P", 2))))
        repo.get_and_apply("cart-1", _decide(Confirm("cart-1")))
        before = (tmp_path / "data" / "carts.json").read_text()

        assert repo.get_and_apply("cart-1", _decide(Confirm("cart-1"))) == []
        assert (tmp_path / "data" / "carts.json").read_text() == before

    def test_no_temp_files_left_behind(self, tmp_path, repo):
        repo.get_and_apply("cart-1", _decide(AddProduct("cart-1", ProductItem("P", 2))))
        assert not list((tmp_path / "data").glob("*.tmp"))


class TestTwoWritersOnOneFile:

    @pytest.fixture
    def writers(self, tmp_path):
        path = tmp_path / "data" / "carts.json"
        first, second = JsonCartRepository(path), JsonCartRepository(path)
        first.get_and_apply("cart-1", _decide(AddProduct("cart-1", ProductItem("P", 1))))
        return first, second

    @staticmethod
    def _add_to(repo, quantity):
        """Load the cart and apply one more line, without storing it."""
        cart = repo.find("cart-1")
        event = ProductAdded("cart-1", PricedProductItem("P", quantity, Decimal("9.99")), T0)
        cart.apply(event)
        return cart, [event]

    def test_stale_instance_is_rejected(self, writers):
        first, second = writers
        stale_cart, stale_events = self._add_to(first, 2)

        second.get_and_apply("cart-1", _decide(AddProduct("cart-1", ProductItem("P", 3))))

        with pytest.raises(ConcurrencyConflict, match="expected version 2, but current version is 3"):
            first.store("cart-1", 2, stale_cart, stale_events)

        cart = second.find("cart-1")
        assert cart.items == [PricedProductItem("P", 4, Decimal("9.99"))]
        assert len(first.events_for("cart-1")) == 3

    def test_interleaved_stores_keep_every_committed_event(self, writers, monkeypatch):
        first, second = writers
        first_cart, first_events = self._add_to(first, 2)
        second_cart, second_events = self._add_to(second, 3)

        inside = threading.Event()
        release = threading.Event()
        write = json_cart_repository.write_json_atomically

        def slow_write(path, data):
            inside.set()
            release.wait(timeout=5)
            write(path, data)

        monkeypatch.setattr(json_cart_repository, "write_json_atomically", slow_write)
        errors = {}

        def store(name, repo, cart, events):
            try:
                repo.store("cart-1", 2, cart, events)
            except ConcurrencyConflict as exc:
                errors[name] = exc

        first_thread = threading.Thread(
            target=store, args=("first", first, first_cart, first_events)
        )
        first_thread.start()
        assert inside.wait(timeout=5)

        second_thread = threading.Thread(
            target=store, args=("second", second, second_cart, second_events)
        )
        second_thread.start()
        time.sleep(0.2)
        release.set()
        first_thread.join(timeout=10)
        second_thread.join(timeout=10)

        assert list(errors) == ["second"]
        events = first.events_for("cart-1")
        assert [e.product_item.quantity for e in events[1:]] == [1, 2]
        assert second.find("cart-1").items == [PricedProductItem("P", 3, Decimal("9.99"))]


class TestJsonProductRepository:

    def test_save_and_load(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.save(Product("1", "Widget", Money.of("9.99")))

        reloaded = JsonProductRepository(tmp_path / "products.json")
        assert reloaded.get_by_id("1") == Product("1", "Widget", Money.of("9.99"))
        assert reloaded.get_by_name(" WIDGET ").id == "1"
        assert reloaded.get_by_id("2") is None
        assert [p.id for p in reloaded.list_all()] == ["1"]
