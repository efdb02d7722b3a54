"""Pydantic request/response schemas for the Preorders API.

These are external contracts, kept separate from
internal Protean commands and aggregates.
"""

from datetime import datetime

from pydantic import BaseModel

from preorders.cart.cart import Cart


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    address_1: str | None = None
    address_2: str | None = None
    city: str | None = None
    province: str | None = None
    postal_code: str | None = None
    country_code: str | None = None


class LineItemSchema(BaseModel):
    title: str | None = None
    quantity: int | None = None
    metadata: dict = {}


class PreorderSchema(BaseModel):
    id: str
    email: str | None = None
    created_at: datetime | None = None
    metadata: dict = {}
    shipping_address: AddressSchema | None = None
    items: list[LineItemSchema] = []

    @classmethod
    def from_cart(cls, cart: Cart) -> "PreorderSchema":
        address = cart.shipping_address
        return cls(
            id=str(cart.id),
            email=cart.email,
            created_at=cart.created_at,
            metadata=cart.metadata_bag(),
            shipping_address=(
                AddressSchema(**{name: getattr(address, name) for name in AddressSchema.model_fields})
                if address is not None
                else None
            ),
            items=[
                LineItemSchema(title=item.title, quantity=item.quantity, metadata=item.metadata_bag())
                for item in cart.items
            ],
        )


# ---------------------------------------------------------------------------
# Admin Response Schemas
# ---------------------------------------------------------------------------
class PreorderListResponse(BaseModel):
    preorders: list[PreorderSchema]
    count: int
    offset: int
    limit: int


class PreorderDeletedResponse(BaseModel):
    id: str
    deleted: bool = True


class SellabilityResponse(BaseModel):
    sellable: bool
    preorder: bool


# ---------------------------------------------------------------------------
# Storefront Schemas
# ---------------------------------------------------------------------------
class SubmitPreorderRequest(BaseModel):
    email: str
    shipping_address: AddressSchema | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "fan@example.com",
                    "shipping_address": {
                        "first_name": "Ada",
                        "last_name": "Lovelace",
                        "address_1": "12 Analytical Row",
                        "city": "London",
                        "postal_code": "N1 7AA",
                        "country_code": "gb",
                    },
                }
            ]
        }
    }


class PreorderSubmittedResponse(BaseModel):
    id: str
    submitted: bool = True


class CheckoutResponse(BaseModel):
    preorder: bool
    step: str
    show_summary: bool
