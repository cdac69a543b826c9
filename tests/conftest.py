import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the protean config environment before the domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


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
def _reset_gateway():
    yield

    from storefront.gateway import reset_gateway

    reset_gateway()


# ---------------------------------------------------------------------------
# Catalog fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_product():
    from storefront.catalog.product import Product, Rating

    def _make(product_id=1, price=10.0, title=None, category="electronics", **kwargs):
        return Product(
            product_id=product_id,
            title=title or f"Product {product_id}",
            price=price,
            description=kwargs.pop("description", "A test product"),
            category=category,
            image=kwargs.pop("image", f"https://example.com/img/{product_id}.jpg"),
            rating=kwargs.pop("rating", Rating(rate=4.2, count=10)),
            **kwargs,
        )

    return _make


@pytest.fixture()
def products(make_product):
    return [
        make_product(1, 109.95, "Fjallraven Backpack", "men's clothing"),
        make_product(2, 22.3, "Mens Casual Premium Slim Fit T-Shirts", "men's clothing"),
        make_product(3, 55.99, "Mens Cotton Jacket", "men's clothing"),
        make_product(9, 64.0, "WD 2TB Elements Portable Hard Drive", "electronics"),
        make_product(14, 999.99, "Samsung 49-Inch Curved Monitor", "electronics"),
    ]


@pytest.fixture()
def gateway(products):
    from storefront.gateway.fake_adapter import FakeStoreGateway

    return FakeStoreGateway(products)


@pytest.fixture()
def session(gateway):
    from storefront.cart.session import ShoppingSession

    return ShoppingSession(gateway=gateway, user_id=1)


# ---------------------------------------------------------------------------
# Checkout fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def valid_address():
    from storefront.order.order import Address

    return Address(
        first_name="Jane",
        last_name="Doe",
        address_line1="1 Main St",
        city="Springfield",
        state="IL",
        zip_code="62701",
    )


@pytest.fixture()
def valid_card():
    from storefront.order.order import PaymentMethod, PaymentType

    return PaymentMethod(
        payment_type=PaymentType.CREDIT_CARD.value,
        card_number="4111111111111111",
        expiry_month=12,
        expiry_year=2030,
        cvv="123",
        card_holder_name="Jane Doe",
    )
