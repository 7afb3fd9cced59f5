from datetime import datetime
from typing import Literal

from pydantic import Field

from pos_api.schemas.base import APIModel

Role = Literal["cashier", "manager", "admin"]


class LoginRequest(APIModel):
    username: str
    password: str


class UserCreate(APIModel):
    username: str = Field(..., min_length=3, max_length=64)
    password: str = Field(..., min_length=8, max_length=72, description="Plain password (will be hashed). Minimum 8 characters.")
    role: Role = "cashier"
    email: str | None = None


class UserUpdate(APIModel):
    password: str | None = Field(None, min_length=8, max_length=72)
    role: Role | None = None
    email: str | None = None


class UserResponse(APIModel):
    id: str
    username: str
    role: str
    email: str | None
    created_at: datetime


class LoginResponse(APIModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
