"""Preorder CSV export for fulfilment planning.

One row per active preorder, in the same order as the listing, with the
shipping address flattened into columns and the line items collapsed
into a single ``items`` cell.
"""

import csv
import io
from datetime import date, datetime

from preorders.cart.cart import Cart
from preorders.report.listing import effective_submitted_at, sort_preorders

HEADER = [
    "submitted_at",
    "preorder_id",
    "email",
    "first_name",
    "last_name",
    "phone",
    "address_1",
    "address_2",
    "city",
    "province",
    "postal_code",
    "country",
    "items",
]


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def render_item(item) -> str:
    quantity = item.quantity if item.quantity is not None else 0
    label = f"{item.title or 'Item'} x{quantity}"
    if item.preorder_size is not None:
        label += f" (Size: {item.preorder_size})"
    return label


def render_items(cart: Cart) -> str:
    return " | ".join(render_item(item) for item in cart.items)


def _row(cart: Cart) -> list:
    address = cart.shipping_address

    def field(name):
        return getattr(address, name) if address is not None else None

    return [
        effective_submitted_at(cart),
        cart.id,
        cart.email,
        field("first_name"),
        field("last_name"),
        field("phone"),
        field("address_1"),
        field("address_2"),
        field("city"),
        field("province"),
        field("postal_code"),
        (field("country_code") or "").upper(),
        render_items(cart),
    ]


def export_preorders_csv(carts) -> str:
    """Render all active preorders as CSV text, newline-terminated rows."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(HEADER)
    for cart in sort_preorders(carts):
        writer.writerow([_cell(value) for value in _row(cart)])
    return buffer.getvalue()


def export_filename(today: date) -> str:
    return f"preorders-{today.isoformat()}.csv"
