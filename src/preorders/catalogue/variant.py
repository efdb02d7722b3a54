"""ProductVariant aggregate — the inventory configuration of a sellable variant.

Variants are owned by the catalogue. This context only reads them to
decide whether a variant can be bought right now or only preordered.

Each variant links to one or more inventory items. A link says how many
units of the item one unit of the variant consumes (``required_quantity``)
and carries the item's stock per stock location.
"""

import json

from protean.fields import Boolean, HasMany, Identifier, Integer, String, Text

from preorders.domain import preorders


@preorders.entity(part_of="ProductVariant")
class InventoryItemLink:
    inventory_item_id = Identifier(required=True)
    required_quantity = Integer(default=1)
    location_levels = Text()  # JSON: list of {location_id, stocked_quantity, reserved_quantity}

    def levels(self):
        """Return the parsed location levels. Raises ValueError on malformed JSON."""
        if not self.location_levels:
            return []
        return json.loads(self.location_levels)


@preorders.aggregate
class ProductVariant:
    title = String(max_length=255)
    sku = String(max_length=50)
    manage_inventory = Boolean(default=True)
    allow_backorder = Boolean(default=False)
    inventory_items = HasMany(InventoryItemLink)

    @classmethod
    def create(cls, title=None, sku=None, manage_inventory=True, allow_backorder=False, inventory_items=None):
        """Build a variant.

        Args:
            inventory_items: List of dicts with inventory_item_id,
                             required_quantity and location_levels (list of dicts).
        """
        links = [
            InventoryItemLink(
                inventory_item_id=link["inventory_item_id"],
                required_quantity=link.get("required_quantity", 1),
                location_levels=json.dumps(link.get("location_levels") or []),
            )
            for link in inventory_items or []
        ]
        return cls(
            title=title,
            sku=sku,
            manage_inventory=manage_inventory,
            allow_backorder=allow_backorder,
            inventory_items=links,
        )
