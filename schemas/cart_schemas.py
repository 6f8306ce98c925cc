from datetime import datetime
from pydantic import Field
from models.cart_items import MAX_LINE_QUANTITY
from schemas.base import CamelModel
from schemas.product_schemas import ProductResponse


class AddToCartRequest(CamelModel):
    product_id: int
    quantity: int = Field(default=1, gt=0, le=MAX_LINE_QUANTITY)


class UpdateCartItemRequest(CamelModel):
    # 0 removes the line
    quantity: int = Field(ge=0, le=MAX_LINE_QUANTITY)


class CartItemResponse(CamelModel):
    id: int
    user_id: int
    product_id: int
    quantity: int
    created_at: datetime


class CartLineResponse(CartItemResponse):
    product: ProductResponse
