from datetime import date, datetime
from decimal import Decimal

from pydantic import Field

from pos_api.schemas.base import APIModel, NonNegativeMoney


class CategoryResponse(APIModel):
    id: str
    name: str
    description: str | None = None


class ProductCreate(APIModel):
    sku: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str | None = None
    price: NonNegativeMoney
    stock: int = Field(0, ge=0)
    category_id: str | None = None
    is_active: bool = True
    expiration_date: date | None = None


class ProductUpdate(APIModel):
    sku: str | None = Field(None, min_length=1)
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    price: NonNegativeMoney | None = None
    # Administrative override, bypasses the commit path
    stock: int | None = Field(None, ge=0)
    category_id: str | None = None
    is_active: bool | None = None
    expiration_date: date | None = None


class ProductResponse(APIModel):
    id: str
    sku: str
    name: str
    description: str | None
    price: Decimal
    stock: int
    category_id: str | None
    is_active: bool
    expiration_date: date | None
    created_at: datetime
    category: CategoryResponse | None = None
