"""Application tests for the stock ledger and admin stock adjustments."""

import pytest
from protean import current_domain
from storefront.catalogue.product import Product
from storefront.errors import EmptyReasonOrMissingField, InsufficientStock, InvalidAdjustment, InvalidQuantity, NotFound
from storefront.inventory.adjustment import AdjustStock, StockAdjustment
from storefront.inventory.ledger import adjust_stock, cancellation_reason, order_reason
from storefront.inventory.queries import stock_history


def _adjust(product_id, adjustment_type="add", quantity=1, reason="Restock", adjusted_by="admin-1"):
    return current_domain.process(
        AdjustStock(
            product_id=product_id,
            adjustment_type=adjustment_type,
            quantity=quantity,
            reason=reason,
            adjusted_by=adjusted_by,
        ),
        asynchronous=False,
    )


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock


def _history(product_id):
    return current_domain.repository_for(StockAdjustment).history_for(product_id)


class TestReasons:
    def test_order_reason(self):
        assert order_reason("o-1") == "order:o-1"

    def test_cancellation_reason(self):
        assert cancellation_reason("o-1") == "cancel:o-1"


class TestAdjustStockCommand:
    def test_add_returns_new_stock(self, add_product):
        product_id = add_product(stock=5)
        assert _adjust(product_id, "add", 3) == 8
        assert _stock(product_id) == 8

    def test_remove(self, add_product):
        product_id = add_product(stock=5)
        assert _adjust(product_id, "remove", 2, reason="Damaged") == 3

    def test_every_adjustment_is_recorded(self, add_product):
        product_id = add_product(stock=5)
        _adjust(product_id, "add", 3, reason="Restock")
        _adjust(product_id, "remove", 1, reason="Damaged")

        history = _history(product_id)
        assert len(history) == 2
        assert {(r.adjustment_type, r.quantity, r.reason) for r in history} == {
            ("add", 3, "Restock"),
            ("remove", 1, "Damaged"),
        }
        assert all(r.adjusted_by == "admin-1" for r in history)

    def test_history_is_newest_first(self, add_product):
        product_id = add_product(stock=5)
        _adjust(product_id, "add", 3, reason="Restock")
        _adjust(product_id, "remove", 1, reason="Damaged")

        history = stock_history(product_id)
        assert [entry["resulting_stock"] for entry in history] == [7, 8]

    def test_remove_more_than_available(self, add_product):
        product_id = add_product(stock=2)
        with pytest.raises(InsufficientStock) as exc:
            _adjust(product_id, "remove", 3, reason="Damaged")
        assert exc.value.messages == {"quantity": ["Insufficient stock. Available: 2"]}
        assert _stock(product_id) == 2
        assert _history(product_id) == []

    @pytest.mark.parametrize("reason", ["", "   ", None])
    def test_reason_is_required(self, add_product, reason):
        product_id = add_product(stock=2)
        with pytest.raises(EmptyReasonOrMissingField):
            _adjust(product_id, "add", 1, reason=reason)
        assert _history(product_id) == []

    def test_quantity_must_be_positive(self, add_product):
        product_id = add_product(stock=2)
        with pytest.raises(InvalidQuantity):
            _adjust(product_id, "add", 0)

    def test_unknown_type(self, add_product):
        product_id = add_product(stock=2)
        with pytest.raises(InvalidAdjustment):
            _adjust(product_id, "set", 1)

    def test_unknown_product(self):
        with pytest.raises(NotFound):
            _adjust("no-such-product")


class TestLedgerFunction:
    def test_adjust_stock_persists_product_and_record(self, add_product):
        product_id = add_product(stock=4)
        product = current_domain.repository_for(Product).get(product_id)

        assert adjust_stock(product, "remove", 4, "order:o-9", adjusted_by="cust-1") == 0

        assert _stock(product_id) == 0
        record = _history(product_id)[0]
        assert record.reason == "order:o-9"
        assert record.resulting_stock == 0


class TestLowStock:
    def test_low_stock_products(self, add_product):
        low = add_product(name="Low", stock=2, stock_threshold=3)
        add_product(name="Plenty", stock=20, stock_threshold=3)
        at_threshold = add_product(name="Edge", stock=3, stock_threshold=3)

        products = current_domain.repository_for(Product).find_low_stock()
        assert [p.id for p in products] == [low, at_threshold]

    def test_scan_covers_the_whole_catalogue(self, add_product):
        for n in range(105):
            add_product(name=f"Bifold {n}", stock=20, stock_threshold=3)
        # Highest stock of all, but below its own threshold
        bulk = add_product(name="Bulk Cardholder", stock=50, stock_threshold=60)

        products = current_domain.repository_for(Product).find_low_stock()
        assert [p.id for p in products] == [bulk]


class TestLongHistory:
    def test_history_returns_every_adjustment(self, add_product):
        product_id = add_product(stock=0)
        for _ in range(120):
            _adjust(product_id, "add", 1)

        history = stock_history(product_id)
        assert len(history) == 120
        assert [entry["resulting_stock"] for entry in history] == list(range(120, 0, -1))
        assert len(_history(product_id)) == 120
