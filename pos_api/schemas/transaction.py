# schemas/transaction.py

from datetime import datetime
from decimal import Decimal
from typing import List, Literal

from pydantic import Field

from pos_api.schemas.base import APIModel, Money, NonNegativeMoney
from pos_api.schemas.customer import CustomerResponse
from pos_api.schemas.product import ProductResponse


class TransactionCreate(APIModel):
    receipt_number: str = Field(..., min_length=1)
    shift_id: str
    customer_id: str | None = None
    user_id: str
    subtotal: NonNegativeMoney
    tax: NonNegativeMoney
    total: NonNegativeMoney
    payment_method: Literal["cash", "card"]
    received_amount: NonNegativeMoney | None = None
    change_amount: NonNegativeMoney | None = None
    # New transactions are always completed and online
    status: Literal["completed"] = "completed"
    is_offline: Literal[False] = False


class TransactionItemCreate(APIModel):
    # Placeholder, replaced with the real id at commit time
    transaction_id: str | None = None
    product_id: str
    quantity: int = Field(..., gt=0)
    unit_price: NonNegativeMoney
    total_price: Money


class TransactionCommitRequest(APIModel):
    transaction: TransactionCreate
    items: List[TransactionItemCreate]


class TransactionItemResponse(APIModel):
    id: str
    transaction_id: str
    product_id: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    product: ProductResponse | None = None


class TransactionHeaderResponse(APIModel):
    id: str
    receipt_number: str
    shift_id: str
    customer_id: str | None
    user_id: str
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    payment_method: str
    received_amount: Decimal | None
    change_amount: Decimal | None
    status: str
    is_offline: bool
    created_at: datetime


class TransactionResponse(TransactionHeaderResponse):
    items: List[TransactionItemResponse]
    customer: CustomerResponse | None = None
