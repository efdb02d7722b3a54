"""Preorders bounded context: preorder carts, follow-up email, variant sellability.

Treats a cart flagged through its metadata as a preorder: the storefront
submits it, operators list, export and soft-delete it, and a follow-up
handler sends a one-time confirmation email. Variants are classified as
sellable and/or preorder from their inventory configuration.
"""

from protean.domain import Domain

from preorders.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

preorders = Domain(name="preorders")
