from datetime import datetime
from decimal import Decimal
from typing import List
from pydantic import Field, model_validator
from models.cart_items import MAX_LINE_QUANTITY
from models.orders import MAX_ORDER_TOTAL
from schemas.base import CamelModel
from schemas.product_schemas import ProductResponse


class OrderLineRequest(CamelModel):
    product_id: int
    quantity: int = Field(gt=0, le=MAX_LINE_QUANTITY)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)


class PlaceOrderRequest(CamelModel):
    items: List[OrderLineRequest] = Field(min_length=1)

    @model_validator(mode="after")
    def check_total(self):
        # total_amount is Numeric(10, 2)
        total = sum(line.price * line.quantity for line in self.items)
        if total > MAX_ORDER_TOTAL:
            raise ValueError(f"Order total cannot exceed {MAX_ORDER_TOTAL}")
        return self


class OrderItemResponse(CamelModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: Decimal
    product: ProductResponse


class OrderResponse(CamelModel):
    id: int
    user_id: int
    total_amount: Decimal
    status: str
    created_at: datetime
    order_items: List[OrderItemResponse] = []
