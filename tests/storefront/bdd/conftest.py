"""Shared BDD fixtures and step definitions for the storefront."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when
from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart
from storefront.catalogue.product import Product
from storefront.errors import Forbidden, NotFound
from storefront.inventory.adjustment import AdjustStock, StockAdjustment
from storefront.order.order import Order
from storefront.order.placement import place_order


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@pytest.fixture()
def catalogue():
    """Product ids by name."""
    return {}


@pytest.fixture()
def attempt(error):
    """Run a domain call, keeping a rejected request in ``error``."""

    def _attempt(func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (ValidationError, NotFound, Forbidden) as exc:
            error["exc"] = exc
            return None

    return _attempt


def _cart(customer):
    return current_domain.repository_for(ShoppingCart).for_customer(customer)


def _product(catalogue, name):
    return current_domain.repository_for(Product).get(catalogue[name])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced at {price:g} with {stock:d} in stock'))
def a_product(add_product, catalogue, name, price, stock):
    catalogue[name] = add_product(name=name, price=price, stock=stock)


@given(parsers.cfparse('the shipping fee to "{city}" is {fee:g}'))
def shipping_fee_for_city(shipping_fees, city, fee):
    shipping_fees({city: fee})


@given(parsers.cfparse('customer "{customer}" has {quantity:d} "{name}" in "{color}" in their cart'))
def cart_holds(catalogue, customer, quantity, name, color):
    current_domain.process(
        AddToCart(customer_id=customer, product_id=catalogue[name], color=color, quantity=quantity),
        asynchronous=False,
    )


@given(parsers.cfparse('an admin removes {quantity:d} "{name}" from stock'))
def admin_removes_stock(catalogue, quantity, name):
    current_domain.process(
        AdjustStock(
            product_id=catalogue[name],
            adjustment_type="remove",
            quantity=quantity,
            reason="Damaged in storage",
            adjusted_by="admin-1",
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('customer "{customer}" checks out'), target_fixture="order")
def checks_out(attempt, shipping_address, customer):
    return attempt(place_order, customer, shipping_address)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the request fails with "{code}"'))
def request_fails_with(error, code):
    assert error["exc"] is not None
    assert getattr(error["exc"], "code", "validation_error") == code


@then("the request succeeds")
def request_succeeds(error):
    assert error["exc"] is None


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_stock_is(catalogue, name, stock):
    assert _product(catalogue, name).stock == stock


@then(parsers.cfparse('the cart of "{customer}" is empty'))
def cart_is_empty(customer):
    cart = _cart(customer)
    assert cart is None or not cart.items


@then(parsers.cfparse('the cart of "{customer}" holds {quantity:d} "{name}" in "{color}"'))
def cart_holds_line(catalogue, customer, quantity, name, color):
    item = _cart(customer).find_item(catalogue[name], color)
    assert item is not None
    assert item.quantity == quantity


@then(parsers.cfparse('customer "{customer}" has {count:d} orders'))
def customer_order_count(customer, count):
    assert current_domain.repository_for(Order).for_customer(customer).total == count


@then(parsers.cfparse('the latest stock adjustment for "{name}" is "{reason_prefix}" {kind} of {quantity:d}'))
def latest_adjustment(catalogue, name, reason_prefix, kind, quantity):
    latest = current_domain.repository_for(StockAdjustment).history_for(catalogue[name])[0]
    assert latest.reason.startswith(reason_prefix)
    assert latest.adjustment_type == kind
    assert latest.quantity == quantity
