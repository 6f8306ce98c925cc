from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import Field, field_validator
from schemas.base import CamelModel


class ProductCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(default=0, ge=0)
    image_url: Optional[str] = None
    category: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, value):
        if not value.strip():
            raise ValueError('Product name cannot be blank')
        return value.strip()


class ProductUpdate(CamelModel):
    """
    Partial patch: only the fields present in the body are applied.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    category: Optional[str] = None

    @field_validator('name', 'price', 'stock')
    @classmethod
    def reject_null(cls, value, info):
        # Explicit nulls would violate NOT NULL columns
        if value is None:
            raise ValueError(f'{info.field_name} cannot be null')
        return value

    @field_validator('name')
    @classmethod
    def validate_name(cls, value):
        if value is None:
            return value
        if not value.strip():
            raise ValueError('Product name cannot be blank')
        return value.strip()


class ProductResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    stock: int
    image_url: Optional[str] = None
    category: Optional[str] = None
    created_at: datetime
