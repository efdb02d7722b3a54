"""Storefront checkout branching for preorder carts.

A cart whose products are all released as preorders skips the delivery
and payment steps: the customer only leaves an address and the cart is
submitted as a preorder instead of being paid for.
"""

from enum import Enum

from preorders.cart.cart import Cart
from preorders.cart.metadata import is_truthy_flag


class CheckoutStep(Enum):
    ADDRESS = "address"
    DELIVERY = "delivery"
    PAYMENT = "payment"


def _is_preorder_product(product_metadata: dict) -> bool:
    # Products that never declared the flag are treated as preorder releases.
    if "preorder" not in product_metadata:
        return True
    return is_truthy_flag(product_metadata["preorder"])


def is_preorder_checkout(cart: Cart) -> bool:
    """True when the cart has items and every item's product is a preorder release."""
    if not cart.items:
        return False
    return all(_is_preorder_product(item.product_metadata_bag()) for item in cart.items)


def resolve_checkout_step(cart: Cart, is_preorder: bool) -> CheckoutStep:
    """Return the step the customer should land on when entering checkout."""
    if is_preorder:
        return CheckoutStep.ADDRESS

    address = cart.shipping_address
    if address is None or not address.address_1 or not cart.email:
        return CheckoutStep.ADDRESS
    if not cart.shipping_method_ids():
        return CheckoutStep.DELIVERY
    return CheckoutStep.PAYMENT
