import json

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _reset_adapters():
    """Fresh fake email outbox and default shipping rates for every test."""
    from storefront.notification.channel import reset_email_channel
    from storefront.shipping.resolver import reset_resolver

    reset_email_channel()
    reset_resolver()
    yield
    reset_email_channel()
    reset_resolver()


@pytest.fixture()
def outbox():
    from storefront.notification.channel import get_email_channel

    return get_email_channel().outbox


@pytest.fixture()
def shipping_fees(monkeypatch):
    """Install a resolver with the given city fee table for the test."""
    from storefront.shipping import resolver as resolver_module

    def _install(fee_table, default_fee=229.0, free_shipping_threshold=10000.0):
        resolver = resolver_module.ShippingFeeResolver(
            fee_table=fee_table,
            default_fee=default_fee,
            free_shipping_threshold=free_shipping_threshold,
        )
        monkeypatch.setattr(resolver_module, "_resolver_instance", resolver)
        return resolver

    return _install


@pytest.fixture()
def add_product():
    """Create a product through the admin command and return its id."""
    from protean import current_domain
    from storefront.catalogue.management import AddProduct

    def _add(name="Classic Bifold", price=1200.0, stock=10, colors=("Brown", "Black"), **kwargs):
        return current_domain.process(
            AddProduct(
                name=name,
                price=price,
                stock=stock,
                colors=json.dumps(list(colors)),
                images=json.dumps(kwargs.pop("images", ["https://cdn.example.com/bifold.jpg"])),
                **kwargs,
            ),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def shipping_address():
    return {
        "name": "Ayesha Khan",
        "email": "ayesha@example.com",
        "phone": "+92 300 1234567",
        "street": "12 Mall Road",
        "city": "Lahore",
        "state": "Punjab",
        "postal_code": "54000",
    }
