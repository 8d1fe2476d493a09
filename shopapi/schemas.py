"""Pydantic request bodies shared between routers and services."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RequestBody(BaseModel):
    """Accepts snake_case and the mobile client's camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =====================================================
# ORDERS
# =====================================================

class OrderItemInput(RequestBody):
    product_id: int
    quantity: int = Field(..., gt=0)
    price: float = Field(..., ge=0)


class CreateOrderPayload(RequestBody):
    user_id: int
    total_amount: float = Field(..., ge=0)
    ship_address: str
    receiver_name: str
    phone_number: str
    payment_method_id: Optional[int] = None
    shipping_method_id: Optional[int] = None
    items: List[OrderItemInput] = []


class OrderStatusPayload(RequestBody):
    status: str
    cancel_reason: Optional[str] = None


# =====================================================
# ADDRESSES
# =====================================================

class AddressCreate(RequestBody):
    user_id: int
    receiver_name: str
    phone_number: str
    street_address: str
    city: str
    is_default: bool = False


class AddressUpdate(RequestBody):
    receiver_name: Optional[str] = None
    phone_number: Optional[str] = None
    street_address: Optional[str] = None
    city: Optional[str] = None
    is_default: Optional[bool] = None


# =====================================================
# CART & WISHLIST
# =====================================================

class AddToCartPayload(RequestBody):
    user_id: int
    product_id: int
    quantity: int = Field(1, gt=0)


class UpdateCartItemPayload(RequestBody):
    cart_item_id: int
    quantity: int = Field(..., gt=0)


class WishlistTogglePayload(RequestBody):
    user_id: int
    product_id: int
