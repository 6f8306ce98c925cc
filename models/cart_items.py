from core.database import Base
from sqlalchemy import (Column, Integer, ForeignKey, UniqueConstraint, CheckConstraint)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin

# Upper bound for a single cart or order line
MAX_LINE_QUANTITY = 10_000

class CartItem(Base, CreatedAtMixin):
    """
    One line of a user's cart. There is at most one line per
    (user, product) pair; adding the same product again increments it.
    """
    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_cart_items_user_product"),
        CheckConstraint("quantity > 0", name="check_positive_cart_quantity"),
        CheckConstraint(f"quantity <= {MAX_LINE_QUANTITY}", name="check_max_cart_quantity"),
    )

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    #relationships
    user = relationship("User", back_populates="cart_items")
    product = relationship("Product", back_populates="cart_items")

    quantity = Column(Integer, nullable=False, default=1)
