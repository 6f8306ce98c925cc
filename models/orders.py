from core.database import Base
from sqlalchemy.orm import relationship
from decimal import Decimal
from sqlalchemy import (Column, Integer, ForeignKey, Numeric, Enum)
from .mixins import CreatedAtMixin, UpdatedAtMixin

ORDER_STATUSES = ("pending", "confirmed", "completed", "cancelled")

# Largest value Numeric(10, 2) holds
MAX_ORDER_TOTAL = Decimal("99999999.99")

class Order(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "orders"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    #relationships
    user = relationship("User", back_populates="orders")
    order_items = relationship("OrderItem", back_populates="order", order_by="OrderItem.id")

    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(Enum(*ORDER_STATUSES, name="order_status"), default="pending", nullable=False)
