import pytest
from preorders.notification.channel import get_email_channel, reset_email_channel

_MAILER_ENV = ("RESEND_API_KEY", "PREORDER_FROM_EMAIL", "PREORDER_REPLY_TO", "PREORDER_STORE_NAME")


@pytest.fixture(scope="session")
def _preorders_domain():
    """Initialize the preorders domain once per session."""
    from preorders.domain import preorders

    preorders.init()
    return preorders


@pytest.fixture(scope="session", autouse=True)
def setup_db(_preorders_domain):
    from preorders.utils.db import drop_db, setup_db

    setup_db(_preorders_domain)

    yield

    drop_db(_preorders_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_preorders_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _preorders_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture(autouse=True)
def fake_email(monkeypatch):
    """Route email to the in-memory adapter; the mailer starts switched off."""
    for name in _MAILER_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("EMAIL_ADAPTER", "fake")
    reset_email_channel()

    yield get_email_channel()

    reset_email_channel()


@pytest.fixture()
def mailer(monkeypatch, fake_email):
    """Switch the follow-up mailer on. Returns the fake adapter."""
    monkeypatch.setenv("RESEND_API_KEY", "re_test_key")
    monkeypatch.setenv("PREORDER_FROM_EMAIL", "studio@example.com")
    monkeypatch.setenv("PREORDER_REPLY_TO", "hello@example.com")
    return fake_email


_DEFAULT_ADDRESS = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "phone": "+44 20 7946 0000",
    "address_1": "12 Analytical Row",
    "city": "London",
    "postal_code": "N1 7AA",
    "country_code": "gb",
}

_DEFAULT_ITEMS = [{"title": "Tour Tee", "quantity": 1, "metadata": {"preorder_size": "M"}}]


@pytest.fixture()
def make_cart():
    """Factory for carts as the storefront stores them, persisted by default.

    Preorder flags go straight into the metadata bag, so no events are raised.
    """
    from protean import current_domain

    from preorders.cart.cart import Cart

    def _make(
        email="fan@example.com",
        items=None,
        shipping_address=None,
        metadata=None,
        shipping_methods=None,
        created_at=None,
        persist=True,
    ):
        cart = Cart.create(
            email=email,
            items=_DEFAULT_ITEMS if items is None else items,
            shipping_address=_DEFAULT_ADDRESS if shipping_address is None else shipping_address,
            metadata=metadata,
            shipping_methods=shipping_methods,
            created_at=created_at,
        )
        if persist:
            current_domain.repository_for(Cart).add(cart)
        return cart

    return _make


@pytest.fixture()
def make_variant():
    from protean import current_domain

    from preorders.catalogue.variant import ProductVariant

    def _make(persist=True, **kwargs):
        variant = ProductVariant.create(title=kwargs.pop("title", "Tour Tee / M"), **kwargs)
        if persist:
            current_domain.repository_for(ProductVariant).add(variant)
        return variant

    return _make
