"""Preorder soft-delete — command and handler.

Deleting a preorder only flags the cart's metadata. The cart record is
kept and disappears from the preorder listing and export.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from preorders.cart.cart import Cart
from preorders.domain import preorders


@preorders.command(part_of="Cart")
class DeletePreorder:
    """Soft-delete a preorder. Raises ObjectNotFoundError for an unknown cart."""

    cart_id = Identifier(required=True)


@preorders.command_handler(part_of=Cart)
class DeletePreorderHandler:
    @handle(DeletePreorder)
    def delete_preorder(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.soft_delete_preorder()
        repo.add(cart)
        return {"id": str(cart.id), "deleted": True}
