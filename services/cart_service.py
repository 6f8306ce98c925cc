from fastapi import HTTPException
from starlette import status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, contains_eager
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from models.cart_items import CartItem, MAX_LINE_QUANTITY
from utils.logger import get_logger

logger = get_logger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class CartService:
    """
    Cart lines, one per (user, product).

    Every method commits before returning; nothing is cached.
    """

    @staticmethod
    def _line_query(db: Session, user_id: int, product_id: int):
        return db.query(CartItem).filter(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id
        )

    @staticmethod
    def get_cart_by_user(db: Session, user_id: int) -> list[CartItem]:
        return (
            db.query(CartItem)
            .join(CartItem.product)
            .options(contains_eager(CartItem.product))
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.id)
            .all()
        )

    @staticmethod
    def add_to_cart(db: Session, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
        """
        Adds ``quantity`` of a product to the user's cart.

        If the user already has a line for the product its quantity is
        incremented, otherwise a line is created. The increment happens in a
        single INSERT ... ON CONFLICT statement, so concurrent adds of the same
        product (double clicks) never lose an update.

        Raises:
            HTTPException: 400 when the line would exceed MAX_LINE_QUANTITY
        """
        dialect = db.get_bind().dialect.name
        if dialect not in UPSERT_INSERTS:
            raise NotImplementedError(f"Cart upsert is not supported on {dialect}")

        stmt = UPSERT_INSERTS[dialect](CartItem).values(
            user_id=user_id,
            product_id=product_id,
            quantity=quantity
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[CartItem.user_id, CartItem.product_id],
            set_={"quantity": CartItem.quantity + stmt.excluded.quantity}
        )

        try:
            db.execute(stmt)
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(
                "Cart line quantity limit exceeded",
                extra={"user_id": user_id, "product_id": product_id, "added": quantity}
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cart line quantity cannot exceed {MAX_LINE_QUANTITY}"
            )

        line = CartService._line_query(db, user_id, product_id).populate_existing().one()

        logger.info(
            "Added to cart",
            extra={"user_id": user_id, "product_id": product_id,
                   "added": quantity, "quantity": line.quantity}
        )
        return line

    @staticmethod
    def update_cart_item(db: Session, user_id: int, product_id: int, quantity: int) -> CartItem | None:
        """
        Sets a line's quantity (absolute, not an increment).

        A quantity of zero or less removes the line and returns None.
        Returns None as well when the user has no line for the product.
        """
        if quantity <= 0:
            CartService.remove_from_cart(db, user_id, product_id)
            return None

        line = CartService._line_query(db, user_id, product_id).one_or_none()
        if not line:
            return None

        line.quantity = quantity
        db.commit()
        db.refresh(line)
        return line

    @staticmethod
    def remove_from_cart(db: Session, user_id: int, product_id: int) -> bool:
        deleted = CartService._line_query(db, user_id, product_id).delete()
        db.commit()
        return deleted > 0

    @staticmethod
    def clear_cart(db: Session, user_id: int, commit: bool = True) -> bool:
        """
        Deletes every line of the user's cart. Succeeds on an empty cart.

        With ``commit=False`` the delete joins the caller's transaction.
        """
        deleted = db.query(CartItem).filter(CartItem.user_id == user_id).delete()
        if commit:
            db.commit()

        logger.debug("Cart cleared", extra={"user_id": user_id, "rows": deleted})
        return True
