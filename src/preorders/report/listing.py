"""Filter, order and paginate carts into the preorder report.

The whole cart table is read and filtered in memory; preorders are
ordered newest first by their effective submission time.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from preorders.cart.cart import Cart, is_preorder_cart
from preorders.shared.errors import UpstreamFailure

logger = structlog.get_logger(__name__)

DEFAULT_LIMIT = 50
MAX_LIMIT = 200

_FETCH_BATCH = 100
_EPOCH = datetime.fromtimestamp(0, UTC)


@dataclass(frozen=True)
class PreorderPage:
    preorders: list
    count: int
    offset: int
    limit: int


def _as_number(raw) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def resolve_limit(raw) -> int:
    """Clamp a requested page size to [1, MAX_LIMIT]; unusable input gives DEFAULT_LIMIT."""
    value = _as_number(raw)
    if value is None:
        return DEFAULT_LIMIT
    return int(min(max(value, 1), MAX_LIMIT))


def resolve_offset(raw) -> int:
    value = _as_number(raw)
    if value is None:
        return 0
    return int(max(value, 0))


def _to_datetime(value) -> datetime:
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        try:
            moment = datetime.fromisoformat(value)
        except ValueError:
            return _EPOCH
    else:
        return _EPOCH
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


def effective_submitted_at(cart: Cart):
    """The submission time as stored: the metadata string, else the cart's created_at."""
    submitted_at = cart.preorder.submitted_at
    return submitted_at if submitted_at is not None else cart.created_at


def _sort_key(cart: Cart):
    return (_to_datetime(effective_submitted_at(cart)), _to_datetime(cart.created_at))


def sort_preorders(carts) -> list:
    """Filter to active preorders, newest submission first."""
    return sorted((cart for cart in carts if is_preorder_cart(cart)), key=_sort_key, reverse=True)


def list_preorders(carts, limit=None, offset=None) -> PreorderPage:
    take = resolve_limit(limit)
    skip = resolve_offset(offset)
    preorders = sort_preorders(carts)

    return PreorderPage(
        preorders=preorders[skip : skip + take],
        count=len(preorders),
        offset=skip,
        limit=take,
    )


def fetch_carts() -> list:
    """Read every cart from the repository.

    Raises:
        UpstreamFailure: the data layer could not be read.
    """
    dao = current_domain.repository_for(Cart)._dao
    carts = []
    offset = 0

    try:
        while True:
            batch = dao.query.order_by("id").offset(offset).limit(_FETCH_BATCH).all().items
            carts.extend(batch)
            if len(batch) < _FETCH_BATCH:
                break
            offset += _FETCH_BATCH
    except Exception as exc:
        logger.error("Failed to fetch carts", error=str(exc))
        raise UpstreamFailure("Failed to fetch carts") from exc

    return carts
