import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from sqlalchemy.exc import SQLAlchemyError
from models.orders import Order
from models.order_items import OrderItem
from services.cart_service import CartService
from services.order_service import OrderService
from services.product_service import ProductService


def lines(walkman, cassette):
    return [
        {"product_id": walkman.id, "quantity": 2, "price": Decimal("10.00")},
        {"product_id": cassette.id, "quantity": 1, "price": Decimal("5.00")},
    ]


def test_create_order_with_items(session, customer, walkman, cassette):
    """Test that the order and its items are created together."""
    order = OrderService.create_order(
        session,
        {"user_id": customer.id, "total_amount": Decimal("25.00")},
        lines(walkman, cassette)
    )

    assert order.id is not None
    assert order.status == "pending"
    assert order.total_amount == Decimal("25.00")

    items = session.query(OrderItem).filter(OrderItem.order_id == order.id).all()
    assert len(items) == 2
    assert {item.product_id for item in items} == {walkman.id, cassette.id}


def test_place_order_totals_and_clears_cart(session, customer, walkman, cassette):
    CartService.add_to_cart(session, customer.id, walkman.id, 2)
    CartService.add_to_cart(session, customer.id, cassette.id, 1)

    order = OrderService.place_order(session, customer.id, lines(walkman, cassette))

    assert order.total_amount == Decimal("25.00")
    assert len(order.order_items) == 2
    assert CartService.get_cart_by_user(session, customer.id) == []


def test_order_item_price_is_a_snapshot(session, customer, walkman, cassette):
    """Test that repricing a product does not touch prices already ordered."""
    order = OrderService.place_order(session, customer.id, lines(walkman, cassette))

    ProductService.update_product(session, walkman.id, {"price": Decimal("99.00")})

    reloaded = OrderService.get_order(session, order.id)
    prices = {item.product_id: item.price for item in reloaded.order_items}

    assert prices[walkman.id] == Decimal("10.00")
    assert reloaded.total_amount == Decimal("25.00")


def test_place_order_rolls_back_on_failure(session, customer, walkman, cassette, monkeypatch):
    """Test that a failure while clearing the cart leaves no order behind."""
    CartService.add_to_cart(session, customer.id, walkman.id, 2)

    def broken_clear(db, user_id, commit=True):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(CartService, "clear_cart", staticmethod(broken_clear))

    with pytest.raises(SQLAlchemyError):
        OrderService.place_order(session, customer.id, lines(walkman, cassette))

    assert session.query(Order).count() == 0
    assert session.query(OrderItem).count() == 0
    assert len(CartService.get_cart_by_user(session, customer.id)) == 1


def test_get_orders_by_user_newest_first(session, customer, other_customer, walkman, cassette):
    first = OrderService.place_order(session, customer.id, lines(walkman, cassette))
    second = OrderService.place_order(session, customer.id, lines(walkman, cassette))
    OrderService.place_order(session, other_customer.id, lines(walkman, cassette))

    first.created_at = datetime.now() - timedelta(hours=1)
    session.commit()

    orders = OrderService.get_orders_by_user(session, customer.id)

    assert [o.id for o in orders] == [second.id, first.id]
    assert all(o.user_id == customer.id for o in orders)
    assert orders[0].order_items[0].product.name == "Walkman"


def test_get_orders_same_timestamp_uses_id(session, customer, walkman, cassette):
    """Test the tie-break when two orders share a creation time."""
    first = OrderService.place_order(session, customer.id, lines(walkman, cassette))
    second = OrderService.place_order(session, customer.id, lines(walkman, cassette))

    stamp = datetime(2026, 1, 1, 12, 0, 0)
    first.created_at = stamp
    second.created_at = stamp
    session.commit()

    orders = OrderService.get_orders_by_user(session, customer.id)

    assert [o.id for o in orders] == [second.id, first.id]


def test_get_order_missing(session):
    assert OrderService.get_order(session, 12345) is None


@pytest.mark.parametrize("items,expected", [
    ([{"price": "10.00", "quantity": 2}, {"price": "5.00", "quantity": 1}], Decimal("25.00")),
    ([{"price": "0.10", "quantity": 3}], Decimal("0.30")),
    ([{"price": Decimal("19.99"), "quantity": 1}], Decimal("19.99")),
    ([], Decimal("0.00")),
])
def test_calculate_order_total(items, expected):
    assert OrderService.calculate_order_total(items) == expected
