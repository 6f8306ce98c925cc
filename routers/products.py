from typing import List
from fastapi import APIRouter, HTTPException, Request, Response
from starlette import status
from utils.deps import db_dependency, admin_dependency
from schemas.product_schemas import ProductCreate, ProductUpdate, ProductResponse
from services.product_service import ProductService
from middleware.rate_limiter import limiter
from utils.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(
    prefix="/api/products",
    tags=["products"]
)


@router.get("", response_model=List[ProductResponse])
async def list_products(db: db_dependency):
    return ProductService.get_all_products(db)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: db_dependency):
    product = ProductService.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def create_product(request: Request, body: ProductCreate, admin: admin_dependency, db: db_dependency):
    """
    Add a product to the catalog (admin only).
    """
    product = ProductService.create_product(db, body.model_dump())

    logger.info("Admin created product", extra={"admin_id": admin.id, "product_id": product.id})

    return product


@router.put("/{product_id}", response_model=ProductResponse)
@limiter.limit("30/minute")
async def update_product(request: Request, product_id: int, body: ProductUpdate,
    admin: admin_dependency, db: db_dependency):
    """
    Patch a product (admin only). Only fields present in the body change.
    """
    product = ProductService.update_product(db, product_id, body.model_dump(exclude_unset=True))
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("30/minute")
async def delete_product(request: Request, product_id: int, admin: admin_dependency, db: db_dependency):
    if not ProductService.delete_product(db, product_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    logger.info("Admin deleted product", extra={"admin_id": admin.id, "product_id": product_id})

    return Response(status_code=status.HTTP_204_NO_CONTENT)
