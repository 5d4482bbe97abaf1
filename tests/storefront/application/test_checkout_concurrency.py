"""Two checkouts racing for the last units of a product."""

import threading

import pytest
from protean import current_domain
from protean.exceptions import ExpectedVersionError
from storefront.cart.items import AddToCart
from storefront.catalogue.product import Product
from storefront.catalogue.repository import ProductRepository
from storefront.domain import storefront
from storefront.errors import InsufficientStock, OutOfStock
from storefront.inventory.adjustment import StockAdjustment
from storefront.order import placement
from storefront.order.order import Order


def _add(product_id, customer_id, quantity=1):
    current_domain.process(
        AddToCart(customer_id=customer_id, product_id=product_id, color="Brown", quantity=quantity),
        asynchronous=False,
    )


def _order_rows(product_id):
    history = current_domain.repository_for(StockAdjustment).history_for(product_id)
    return [row for row in history if row.reason.startswith("order:")]


@pytest.fixture()
def rival_checkout(monkeypatch, shipping_address):
    """Run a second customer's checkout while the first is mid-handler.

    The first product read of the first checkout starts the rival in its own
    thread and domain context and waits for it to commit, so the first
    checkout carries on with a product it read before the rival's commit.
    """
    outcome = {}
    original = ProductRepository.fetch_available

    def _interleave(customer_id):
        def fetch_available(repo, product_id):
            if not outcome:
                outcome["started"] = True
                worker = threading.Thread(target=_rival, args=(customer_id,))
                worker.start()
                worker.join()
            return original(repo, product_id)

        monkeypatch.setattr(ProductRepository, "fetch_available", fetch_available)
        return outcome

    def _rival(customer_id):
        with storefront.domain_context():
            try:
                outcome["order"] = placement.place_order(customer_id, shipping_address)
            except Exception as exc:  # surfaced to the test through ``outcome``
                outcome["error"] = exc

    return _interleave


class TestInterleavedCheckouts:
    @pytest.mark.parametrize("stock, wanted", [(1, 1), (2, 1), (2, 2), (3, 2), (4, 2)])
    def test_only_available_stock_is_sold(self, add_product, shipping_address, rival_checkout, stock, wanted):
        product_id = add_product(stock=stock)
        _add(product_id, "cust-001", quantity=wanted)
        _add(product_id, "cust-002", quantity=wanted)
        outcome = rival_checkout("cust-002")

        try:
            placement.place_order("cust-001", shipping_address)
        except (OutOfStock, InsufficientStock):
            pass

        assert "error" not in outcome
        assert outcome["order"].customer_id == "cust-002"

        winners = min(2, stock // wanted)
        orders = current_domain.repository_for(Order).search().items
        assert len(orders) == winners
        assert current_domain.repository_for(Product).get(product_id).stock == stock - winners * wanted
        assert len(_order_rows(product_id)) == winners

    def test_loser_gets_a_stock_error(self, add_product, shipping_address, rival_checkout):
        product_id = add_product(stock=1)
        _add(product_id, "cust-001")
        _add(product_id, "cust-002")
        outcome = rival_checkout("cust-002")

        with pytest.raises((OutOfStock, InsufficientStock)):
            placement.place_order("cust-001", shipping_address)

        orders = current_domain.repository_for(Order).search().items
        assert [o.customer_id for o in orders] == ["cust-002"]
        assert str(outcome["order"].id) == str(orders[0].id)
        assert current_domain.repository_for(Product).get(product_id).stock == 0
        assert _order_rows(product_id)[0].reason == f"order:{orders[0].id}"


class TestPersistentConflict:
    def test_version_conflict_is_reported_as_stock_error(self, monkeypatch, shipping_address):
        class ConflictingDomain:
            def process(self, command, asynchronous=False):
                raise ExpectedVersionError("Wrong expected version: 1 (Schema: product)")

        monkeypatch.setattr(placement, "current_domain", ConflictingDomain())

        with pytest.raises(InsufficientStock) as exc:
            placement.place_order("cust-001", shipping_address)

        assert exc.value.messages == {
            "stock": ["Stock changed while your order was being placed, please review your cart"]
        }
