from sqlalchemy.sql import func
from sqlalchemy import Column, DateTime


class CreatedAtMixin:
    # listings sort on this column, newest first
    created_at = Column(DateTime, default=func.now(), nullable=False, index=True)

class UpdatedAtMixin:
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
