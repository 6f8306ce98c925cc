from models.users import User
from models.products import Product
from models.cart_items import CartItem
from models.orders import Order
from models.order_items import OrderItem
from models.refresh_tokens import RefreshToken

__all__ = ["User", "Product", "CartItem", "Order", "OrderItem", "RefreshToken"]
