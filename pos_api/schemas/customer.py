from datetime import datetime

from pydantic import Field

from pos_api.schemas.base import APIModel


class CustomerCreate(APIModel):
    name: str = Field(..., min_length=1)
    phone: str | None = None
    email: str | None = None


class CustomerResponse(APIModel):
    id: str
    name: str
    phone: str | None
    email: str | None
    loyalty_points: int
    created_at: datetime
