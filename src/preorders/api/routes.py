"""FastAPI routes for admin preorder reports and the storefront preorder checkout."""

from datetime import UTC, datetime

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response
from protean.exceptions import InvalidDataError, ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from preorders.api.schemas import (
    CheckoutResponse,
    PreorderDeletedResponse,
    PreorderListResponse,
    PreorderSchema,
    PreorderSubmittedResponse,
    SellabilityResponse,
    SubmitPreorderRequest,
)
from preorders.cart.cart import Cart
from preorders.cart.checkout import is_preorder_checkout, resolve_checkout_step
from preorders.cart.deletion import DeletePreorder
from preorders.cart.submission import SubmitPreorder
from preorders.catalogue.sellability import check_variant_availability
from preorders.report.export import export_filename, export_preorders_csv
from preorders.report.listing import fetch_carts, list_preorders
from preorders.shared.errors import UpstreamFailure

# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["preorders"])


@admin_router.get("/preorders", response_model=PreorderListResponse)
async def list_preorder_carts(
    limit: str | None = Query(None),
    offset: str | None = Query(None),
) -> PreorderListResponse:
    try:
        carts = fetch_carts()
    except UpstreamFailure as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    page = list_preorders(carts, limit=limit, offset=offset)
    return PreorderListResponse(
        preorders=[PreorderSchema.from_cart(cart) for cart in page.preorders],
        count=page.count,
        offset=page.offset,
        limit=page.limit,
    )


@admin_router.get("/preorders/export")
async def export_preorder_carts() -> Response:
    try:
        carts = fetch_carts()
    except UpstreamFailure as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    filename = export_filename(datetime.now(UTC).date())
    return Response(
        content=export_preorders_csv(carts),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@admin_router.delete("/preorders/{cart_id}", response_model=PreorderDeletedResponse)
def delete_preorder(cart_id: str) -> PreorderDeletedResponse:
    try:
        result = current_domain.process(DeletePreorder(cart_id=cart_id), asynchronous=False)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Preorder not found") from exc
    return PreorderDeletedResponse(**result)


@admin_router.get("/custom", response_model=SellabilityResponse)
async def variant_availability(variant_id: str | None = Query(None, alias="variantId")) -> SellabilityResponse:
    """Sellable / preorder classification for a product variant."""
    if not variant_id:
        raise HTTPException(status_code=400, detail="variantId is required")

    try:
        result = check_variant_availability(variant_id)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Variant not found") from exc
    except UpstreamFailure as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return SellabilityResponse(sellable=result.sellable, preorder=result.preorder)


# ---------------------------------------------------------------------------
# Storefront Router
# ---------------------------------------------------------------------------
store_router = APIRouter(prefix="/store", tags=["storefront"])


@store_router.get("/carts/{cart_id}/checkout", response_model=CheckoutResponse)
async def checkout_step(cart_id: str) -> CheckoutResponse:
    try:
        cart = current_domain.repository_for(Cart).get(cart_id)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Cart not found") from exc

    preorder = is_preorder_checkout(cart)
    return CheckoutResponse(
        preorder=preorder,
        step=resolve_checkout_step(cart, preorder).value,
        show_summary=not preorder,
    )


@store_router.post("/carts/{cart_id}/preorder", response_model=PreorderSubmittedResponse)
def submit_preorder(cart_id: str, body: SubmitPreorderRequest) -> PreorderSubmittedResponse:
    address = body.shipping_address.model_dump() if body.shipping_address else {}
    try:
        command = SubmitPreorder(cart_id=cart_id, email=body.email, **address)
        result = current_domain.process(command, asynchronous=False)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Cart not found") from exc
    except (ValidationError, InvalidDataError) as exc:
        raise HTTPException(status_code=400, detail=exc.messages) from exc

    return PreorderSubmittedResponse(**result)
