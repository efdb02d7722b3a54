"""Domain events for the Cart aggregate."""

from protean.fields import DateTime, Identifier, String

from preorders.domain import preorders


@preorders.event(part_of="Cart")
class CartUpdated:
    """Any change was made to a cart (items, address, metadata).

    The follow-up notifier re-evaluates the cart on every occurrence.
    """

    __version__ = "v1"

    cart_id = Identifier(required=True)
    updated_at = DateTime(required=True)


@preorders.event(part_of="Cart")
class PreorderSubmitted:
    """The storefront submitted the cart as a preorder."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    email = String(max_length=254)
    submitted_at = DateTime(required=True)


@preorders.event(part_of="Cart")
class PreorderDeleted:
    """An operator soft-deleted the preorder. The cart itself is kept."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    deleted_at = DateTime(required=True)


@preorders.event(part_of="Cart")
class PreorderFollowupSent:
    """The preorder confirmation email was delivered to the customer."""

    __version__ = "v1"

    cart_id = Identifier(required=True)
    email = String(required=True, max_length=254)
    sent_at = DateTime(required=True)
