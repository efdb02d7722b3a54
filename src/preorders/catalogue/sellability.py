"""Can a variant be bought now, or only preordered?

    manage_inventory is off            → sellable, not a preorder
    managed, backorders allowed        → sellable, preorder
    managed, no backorders             → sellable iff available units > 0

Available units of a variant are limited by its scarcest inventory item:
for each link, the net stock summed over all locations (stocked minus
reserved, never below zero) divided by the units that link consumes per
variant sold, rounded down.
"""

import math
from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from preorders.catalogue.variant import ProductVariant
from preorders.shared.errors import InventoryGraphError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Sellability:
    sellable: bool
    preorder: bool


def _quantity(value) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise TypeError(f"Unexpected quantity: {value!r}")
    return float(value)


def _link_units(link) -> int:
    required = link.required_quantity
    required = 1 if required is None else _quantity(required)
    if required <= 0:
        return 0

    levels = link.levels()
    if not isinstance(levels, list):
        raise TypeError(f"Unexpected location levels: {levels!r}")

    net = 0.0
    for level in levels:
        stocked = _quantity(level.get("stocked_quantity"))
        reserved = _quantity(level.get("reserved_quantity"))
        net += max(stocked - reserved, 0)

    return math.floor(net / required)


def available_units(links) -> int | None:
    """Units of the variant that can be sold from stock.

    Returns None when the variant has no inventory items at all.
    """
    units = [_link_units(link) for link in links]
    return min(units) if units else None


def evaluate_sellability(variant: ProductVariant) -> Sellability:
    if not variant.manage_inventory:
        return Sellability(sellable=True, preorder=False)

    if variant.allow_backorder:
        return Sellability(sellable=True, preorder=True)

    units = available_units(variant.inventory_items)
    return Sellability(sellable=units is not None and units > 0, preorder=False)


def check_variant_availability(variant_id: str) -> Sellability:
    """Load a variant and evaluate it.

    Raises:
        ObjectNotFoundError: no variant with this id.
        InventoryGraphError: the variant's inventory data could not be evaluated.
    """
    variant = current_domain.repository_for(ProductVariant).get(variant_id)

    try:
        return evaluate_sellability(variant)
    except (AttributeError, KeyError, TypeError, ValueError, ArithmeticError) as exc:
        logger.error(
            "Failed to calculate variant availability",
            variant_id=str(variant_id),
            error=str(exc),
        )
        raise InventoryGraphError(f"Failed to calculate availability: {exc}") from exc
