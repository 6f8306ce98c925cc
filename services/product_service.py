from sqlalchemy.orm import Session
from fastapi import HTTPException
from starlette import status
from models.products import Product
from models.cart_items import CartItem
from models.order_items import OrderItem
from utils.logger import get_logger

logger = get_logger(__name__)


class ProductService:
    """
    Catalog reads and the admin-side writes.
    """

    @staticmethod
    def get_all_products(db: Session) -> list[Product]:
        # id breaks ties between rows created in the same clock tick
        return db.query(Product).order_by(Product.created_at.desc(), Product.id.desc()).all()

    @staticmethod
    def get_product(db: Session, product_id: int) -> Product | None:
        return db.query(Product).filter(Product.id == product_id).one_or_none()

    @staticmethod
    def create_product(db: Session, fields: dict) -> Product:
        model = Product(**fields)

        db.add(model)
        db.commit()
        db.refresh(model)

        logger.info("Product created", extra={"product_id": model.id, "product_name": model.name})
        return model

    @staticmethod
    def update_product(db: Session, product_id: int, fields: dict) -> Product | None:
        """
        Applies a partial patch. Keys absent from ``fields`` are left alone.
        """
        model = ProductService.get_product(db, product_id)
        if not model:
            return None

        for key, value in fields.items():
            setattr(model, key, value)

        db.commit()
        db.refresh(model)

        logger.info("Product updated", extra={"product_id": model.id, "fields": sorted(fields)})
        return model

    @staticmethod
    def delete_product(db: Session, product_id: int) -> bool:
        """
        Deletes a product and any cart lines pointing at it.

        Returns:
            False if no such product exists

        Raises:
            HTTPException: 409 if the product appears in an order
        """
        model = ProductService.get_product(db, product_id)
        if not model:
            return False

        ordered = db.query(OrderItem.id).filter(OrderItem.product_id == product_id).first()
        if ordered:
            logger.warning("Refused to delete ordered product", extra={"product_id": product_id})
            raise HTTPException(status_code=status.HTTP_409_CONFLICT,
                                detail="Product is referenced by existing orders")

        db.query(CartItem).filter(CartItem.product_id == product_id).delete()
        db.delete(model)
        db.commit()

        logger.info("Product deleted", extra={"product_id": product_id})
        return True
