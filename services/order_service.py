from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from models.orders import Order
from models.order_items import OrderItem
from services.cart_service import CartService
from utils.logger import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")


class OrderService:

    @staticmethod
    def calculate_order_total(items: Iterable[dict]) -> Decimal:
        """
        Sum of price x quantity over the lines, to the cent.

        Each item is a mapping with ``price`` (anything Decimal accepts,
        including the decimal strings clients send) and ``quantity``.
        """
        total = sum(
            (Decimal(str(item["price"])) * int(item["quantity"]) for item in items),
            Decimal("0")
        )
        return total.quantize(CENT, rounding=ROUND_HALF_UP)

    @staticmethod
    def _with_items(query):
        return query.options(
            selectinload(Order.order_items).selectinload(OrderItem.product)
        )

    @staticmethod
    def create_order(db: Session, order_data: dict, items: list[dict], commit: bool = True) -> Order:
        """
        Inserts the order, then one OrderItem per entry of ``items`` stamped
        with the new order id. Both land in the same transaction: with
        ``commit=True`` it is committed here, otherwise the caller owns it.

        ``items`` entries carry ``product_id``, ``quantity`` and ``price``;
        the price is stored as given and never re-read from the product.
        """
        order = Order(**order_data)
        db.add(order)
        db.flush()  # assigns order.id

        for item in items:
            db.add(OrderItem(
                order_id=order.id,
                product_id=item["product_id"],
                quantity=int(item["quantity"]),
                price=Decimal(str(item["price"]))
            ))

        if commit:
            db.commit()
            db.refresh(order)

        return order

    @staticmethod
    def place_order(db: Session, user_id: int, items: list[dict]) -> Order:
        """
        Checkout: creates the order with its items and empties the user's
        cart in one transaction. Any store failure rolls the whole thing back.
        """
        total = OrderService.calculate_order_total(items)

        try:
            order = OrderService.create_order(
                db,
                {"user_id": user_id, "total_amount": total, "status": "pending"},
                items,
                commit=False
            )
            CartService.clear_cart(db, user_id, commit=False)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.error(
                "Order placement failed, rolled back",
                extra={"user_id": user_id, "line_count": len(items)},
                exc_info=True
            )
            raise

        logger.info(
            "Order placed",
            extra={"order_id": order.id, "user_id": user_id, "total_amount": str(total)}
        )

        return OrderService.get_order(db, order.id)

    @staticmethod
    def get_orders_by_user(db: Session, user_id: int) -> list[Order]:
        query = db.query(Order).filter(Order.user_id == user_id)
        return (
            OrderService._with_items(query)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    @staticmethod
    def get_order(db: Session, order_id: int) -> Order | None:
        query = db.query(Order).filter(Order.id == order_id)
        return OrderService._with_items(query).one_or_none()
