"""Preorder submission — command and handler.

The storefront submits a preorder checkout with the customer's contact
and shipping details. The cart is flagged in its metadata and the
follow-up notifier picks it up from the resulting CartUpdated event.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from preorders.cart.cart import Cart
from preorders.cart.checkout import is_preorder_checkout
from preorders.domain import preorders

_ADDRESS_FIELDS = (
    "first_name",
    "last_name",
    "phone",
    "address_1",
    "address_2",
    "city",
    "province",
    "postal_code",
    "country_code",
)


@preorders.command(part_of="Cart")
class SubmitPreorder:
    """Submit a preorder cart with the customer's contact and shipping details."""

    cart_id = Identifier(required=True)
    email = String(required=True, max_length=254)
    first_name = String(max_length=100)
    last_name = String(max_length=100)
    phone = String(max_length=50)
    address_1 = String(max_length=255)
    address_2 = String(max_length=255)
    city = String(max_length=100)
    province = String(max_length=100)
    postal_code = String(max_length=20)
    country_code = String(max_length=2)


@preorders.command_handler(part_of=Cart)
class SubmitPreorderHandler:
    @handle(SubmitPreorder)
    def submit_preorder(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)

        if not is_preorder_checkout(cart):
            raise ValidationError({"cart": ["Only carts made of preorder items can be submitted as a preorder"]})

        address = {field: getattr(command, field) for field in _ADDRESS_FIELDS}
        cart.submit_preorder(
            email=command.email,
            shipping_address=address if any(address.values()) else None,
        )
        repo.add(cart)
        return {"id": str(cart.id), "submitted": True}
