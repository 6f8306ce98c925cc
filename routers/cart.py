from typing import List
from fastapi import APIRouter, HTTPException, Request, Response
from starlette import status
from utils.deps import db_dependency, user_dependency
from schemas.cart_schemas import (AddToCartRequest, UpdateCartItemRequest,
                                  CartItemResponse, CartLineResponse)
from services.cart_service import CartService
from services.product_service import ProductService
from middleware.rate_limiter import limiter
from utils.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(
    prefix="/api/cart",
    tags=["cart"]
)


@router.get("", response_model=List[CartLineResponse])
async def get_cart(user: user_dependency, db: db_dependency):
    return CartService.get_cart_by_user(db, user.id)


@router.post("", response_model=CartItemResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("60/minute")
async def add_to_cart(request: Request, body: AddToCartRequest, user: user_dependency, db: db_dependency):
    """
    Add a product to the cart. Adding a product already in the cart
    increases its quantity.
    """
    if not ProductService.get_product(db, body.product_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    return CartService.add_to_cart(db, user.id, body.product_id, body.quantity)


@router.put("/{product_id}", response_model=CartItemResponse)
@limiter.limit("60/minute")
async def update_cart_item(request: Request, product_id: int, body: UpdateCartItemRequest,
    user: user_dependency, db: db_dependency):
    """
    Set the quantity of a cart line. A quantity of 0 removes it (204).
    """
    line = CartService.update_cart_item(db, user.id, product_id, body.quantity)

    if body.quantity == 0:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    if not line:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cart item not found")

    return line


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_cart(product_id: int, user: user_dependency, db: db_dependency):
    if not CartService.remove_from_cart(db, user.id, product_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cart item not found")

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(user: user_dependency, db: db_dependency):
    CartService.clear_cart(db, user.id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
