"""Tests for preorder detection and the checkout step a customer lands on."""

from preorders.cart.cart import Cart
from preorders.cart.checkout import CheckoutStep, is_preorder_checkout, resolve_checkout_step


def _cart(items, **kwargs):
    return Cart.create(email=kwargs.pop("email", "fan@example.com"), items=items, **kwargs)


class TestIsPreorderCheckout:
    def test_empty_cart_is_not_preorder(self):
        assert is_preorder_checkout(_cart([])) is False

    def test_products_flagged_as_preorder(self):
        cart = _cart(
            [
                {"title": "Tee", "quantity": 1, "product_metadata": {"preorder": True}},
                {"title": "Vinyl", "quantity": 1, "product_metadata": {"preorder": "true"}},
            ]
        )
        assert is_preorder_checkout(cart) is True

    def test_products_without_flag_count_as_preorder(self):
        cart = _cart([{"title": "Tee", "quantity": 1}])
        assert is_preorder_checkout(cart) is True

    def test_one_regular_product_makes_regular_checkout(self):
        cart = _cart(
            [
                {"title": "Tee", "quantity": 1, "product_metadata": {"preorder": True}},
                {"title": "Sticker", "quantity": 1, "product_metadata": {"preorder": False}},
            ]
        )
        assert is_preorder_checkout(cart) is False

    def test_non_true_string_is_regular(self):
        cart = _cart([{"title": "Tee", "quantity": 1, "product_metadata": {"preorder": "yes"}}])
        assert is_preorder_checkout(cart) is False


class TestResolveCheckoutStep:
    def test_preorder_always_lands_on_address(self):
        cart = _cart(
            [{"title": "Tee", "quantity": 1}],
            shipping_address={"address_1": "12 Analytical Row"},
            shipping_methods=["sm_standard"],
        )
        assert resolve_checkout_step(cart, True) == CheckoutStep.ADDRESS

    def test_regular_without_address(self):
        cart = _cart([{"title": "Tee", "quantity": 1}])
        assert resolve_checkout_step(cart, False) == CheckoutStep.ADDRESS

    def test_regular_without_email(self):
        cart = _cart([{"title": "Tee", "quantity": 1}], email=None, shipping_address={"address_1": "1 Main St"})
        assert resolve_checkout_step(cart, False) == CheckoutStep.ADDRESS

    def test_regular_without_shipping_method(self):
        cart = _cart([{"title": "Tee", "quantity": 1}], shipping_address={"address_1": "1 Main St"})
        assert resolve_checkout_step(cart, False) == CheckoutStep.DELIVERY

    def test_regular_ready_for_payment(self):
        cart = _cart(
            [{"title": "Tee", "quantity": 1}],
            shipping_address={"address_1": "1 Main St"},
            shipping_methods=["sm_standard"],
        )
        assert resolve_checkout_step(cart, False) == CheckoutStep.PAYMENT
