from typing import List
from fastapi import APIRouter, HTTPException, Request
from starlette import status
from utils.deps import db_dependency, user_dependency
from schemas.order_schemas import PlaceOrderRequest, OrderResponse
from services.order_service import OrderService
from services.product_service import ProductService
from middleware.rate_limiter import limiter
from utils.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(
    prefix="/api/orders",
    tags=["orders"]
)


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
async def place_order(request: Request, body: PlaceOrderRequest, user: user_dependency, db: db_dependency):
    """
    Checkout. The order total is the sum of price x quantity over the
    submitted lines, and each line keeps the submitted price as its
    snapshot. The user's cart is emptied in the same transaction.
    """
    items = [line.model_dump() for line in body.items]

    for item in items:
        product = ProductService.get_product(db, item["product_id"])

        if not product:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail=f"Unknown product {item['product_id']}")

        # Submitted prices are honoured; mismatches are only reported
        if product.price != item["price"]:
            logger.warning(
                "Order line price differs from catalog price",
                extra={
                    "user_id": user.id,
                    "product_id": product.id,
                    "submitted_price": str(item["price"]),
                    "catalog_price": str(product.price)
                }
            )

    return OrderService.place_order(db, user.id, items)


@router.get("", response_model=List[OrderResponse])
async def list_orders(user: user_dependency, db: db_dependency):
    return OrderService.get_orders_by_user(db, user.id)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, user: user_dependency, db: db_dependency):
    order = OrderService.get_order(db, order_id)

    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    if order.user_id != user.id and not user.is_admin:
        logger.warning("Order access denied", extra={"user_id": user.id, "order_id": order_id})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    return order
