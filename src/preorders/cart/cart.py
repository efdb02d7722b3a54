"""Cart aggregate: the store cart, annotated with preorder metadata.

Carts are created and filled by the storefront. This context only reads
them and writes into ``cart_metadata``, an open JSON object whose
``preorder_*`` keys carry the preorder lifecycle:

    not a preorder → submitted (pending notification) → notified
    submitted / notified → deleted (soft, the cart is kept)

Every mutation raises ``CartUpdated`` so the follow-up notifier can
re-evaluate the cart.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from preorders.cart.events import (
    CartUpdated,
    PreorderDeleted,
    PreorderFollowupSent,
    PreorderSubmitted,
)
from preorders.cart.metadata import PreorderMetadata
from preorders.domain import preorders


def _load_json(raw, default):
    if not raw:
        return default
    return json.loads(raw) if isinstance(raw, str) else raw


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@preorders.value_object(part_of="Cart")
class ShippingAddress:
    """Where the preorder ships once stock is available."""

    first_name = String(max_length=100)
    last_name = String(max_length=100)
    phone = String(max_length=50)
    address_1 = String(max_length=255)
    address_2 = String(max_length=255)
    city = String(max_length=100)
    province = String(max_length=100)
    postal_code = String(max_length=20)
    country_code = String(max_length=2)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@preorders.entity(part_of="Cart")
class LineItem:
    title = String(max_length=255)
    quantity = Integer(min_value=0)
    variant_id = Identifier()
    item_metadata = Text()  # JSON object, may carry preorder_size
    product_metadata = Text()  # JSON object, may carry the product "preorder" flag

    def metadata_bag(self) -> dict:
        return _load_json(self.item_metadata, {})

    def product_metadata_bag(self) -> dict:
        return _load_json(self.product_metadata, {})

    @property
    def preorder_size(self) -> str | None:
        size = self.metadata_bag().get("preorder_size")
        return size if isinstance(size, str) else None


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@preorders.aggregate
class Cart:
    email = String(max_length=254)
    shipping_address = ValueObject(ShippingAddress)
    items = HasMany(LineItem)
    shipping_methods = Text()  # JSON array of shipping method ids
    cart_metadata = Text()  # JSON object, open to other writers
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        email=None,
        items=None,
        shipping_address=None,
        metadata=None,
        shipping_methods=None,
        created_at=None,
    ):
        """Build a cart as the storefront hands it over.

        Args:
            items: List of dicts with title, quantity, and optionally
                   variant_id, metadata and product_metadata.
            shipping_address: Dict with ShippingAddress fields.
            metadata: Initial metadata bag.
        """
        now = datetime.now(UTC)
        line_items = [
            LineItem(
                title=item.get("title"),
                quantity=item.get("quantity"),
                variant_id=item.get("variant_id"),
                item_metadata=json.dumps(item.get("metadata") or {}),
                product_metadata=json.dumps(item.get("product_metadata") or {}),
            )
            for item in items or []
        ]
        return cls(
            email=email,
            items=line_items,
            shipping_address=ShippingAddress(**shipping_address) if shipping_address else None,
            shipping_methods=json.dumps(shipping_methods or []),
            cart_metadata=json.dumps(metadata or {}),
            created_at=created_at or now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Metadata access
    # -------------------------------------------------------------------
    def metadata_bag(self) -> dict:
        return _load_json(self.cart_metadata, {})

    def shipping_method_ids(self) -> list:
        return _load_json(self.shipping_methods, [])

    @property
    def preorder(self) -> PreorderMetadata:
        return PreorderMetadata.from_metadata(self.metadata_bag())

    def _write_preorder(self, preorder: PreorderMetadata, now: datetime) -> None:
        self.cart_metadata = json.dumps(preorder.merge_into(self.metadata_bag()))
        self.updated_at = now

    def _touch(self, now: datetime) -> None:
        self.raise_(CartUpdated(cart_id=str(self.id), updated_at=now))

    # -------------------------------------------------------------------
    # Storefront mutations
    # -------------------------------------------------------------------
    def add_item(self, title, quantity, variant_id=None, metadata=None, product_metadata=None):
        item = LineItem(
            title=title,
            quantity=quantity,
            variant_id=variant_id,
            item_metadata=json.dumps(metadata or {}),
            product_metadata=json.dumps(product_metadata or {}),
        )
        self.add_items(item)
        now = datetime.now(UTC)
        self.updated_at = now
        self._touch(now)
        return item

    def update_metadata(self, **values):
        """Merge arbitrary keys into the metadata bag (other writers' keys)."""
        merged = {**self.metadata_bag(), **values}
        now = datetime.now(UTC)
        self.cart_metadata = json.dumps(merged)
        self.updated_at = now
        self._touch(now)

    # -------------------------------------------------------------------
    # Preorder lifecycle
    # -------------------------------------------------------------------
    def submit_preorder(self, email=None, shipping_address=None):
        """Record the cart as a submitted preorder."""
        if self.preorder.submitted:
            raise ValidationError({"cart": ["Preorder has already been submitted"]})

        if email:
            self.email = email
        if shipping_address:
            self.shipping_address = ShippingAddress(**shipping_address)
        if not self.email:
            raise ValidationError({"email": ["An email address is required to submit a preorder"]})

        now = datetime.now(UTC)
        self._write_preorder(self.preorder.mark_submitted(now.isoformat()), now)

        self.raise_(
            PreorderSubmitted(
                cart_id=str(self.id),
                email=self.email,
                submitted_at=now,
            )
        )
        self._touch(now)

    def soft_delete_preorder(self):
        """Flag the preorder as deleted. Calling it again refreshes the timestamp."""
        now = datetime.now(UTC)
        self._write_preorder(self.preorder.mark_deleted(now.isoformat()), now)

        self.raise_(PreorderDeleted(cart_id=str(self.id), deleted_at=now))
        self._touch(now)

    def record_followup_sent(self):
        """Mark the confirmation email as sent so it is never sent twice."""
        now = datetime.now(UTC)
        self._write_preorder(self.preorder.mark_followup_sent(now.isoformat()), now)

        self.raise_(
            PreorderFollowupSent(
                cart_id=str(self.id),
                email=self.email,
                sent_at=now,
            )
        )
        self._touch(now)


def is_preorder_cart(cart: Cart) -> bool:
    """A cart is a preorder iff it was submitted and not soft-deleted.

    The listing, the export and the follow-up notifier all use this check.
    """
    return cart.preorder.is_active
