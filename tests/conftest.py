"""Shared test fixtures."""
import pytest

from storefront.cart import CartStore
from storefront.config import Settings
from storefront.models import CartItem, ShippingInfo
from storefront.payments import build_drivers
from storefront.session_store import SessionStorage


@pytest.fixture
def sample_shipping():
    return ShippingInfo(
        full_name="Priya Sharma",
        email="priya.sharma@example.com",
        phone="98765 43210",
        address="12 MG Road",
        city="Bengaluru",
        state="Karnataka",
        zip_code="560001",
    )


@pytest.fixture
def sample_items():
    return [
        CartItem(
            product_id=1,
            name="Classic Denim Jacket",
            brand="Levi's",
            price=3499,
            quantity=1,
            selected_size="M",
        ),
        CartItem(
            product_id=3,
            name="Organic Cotton Tee",
            brand="H&M",
            price=599,
            quantity=2,
            selected_size="S",
        ),
    ]


@pytest.fixture
def cart(sample_items):
    store = CartStore()
    for item in sample_items:
        store.add_item(item)
    return store


@pytest.fixture
def storage():
    return SessionStorage()


@pytest.fixture
def fast_settings():
    """Settings with no simulated delays and no card endpoint."""
    return Settings(
        payment_function_url=None,
        cod_delay=0,
        upi_delay=0,
        card_delay=0,
    )


@pytest.fixture
def fast_drivers(fast_settings):
    return build_drivers(fast_settings)
