# schemas/returns.py

from datetime import datetime
from decimal import Decimal
from typing import List, Literal

from pos_api.schemas.base import APIModel, NonNegativeMoney
from pos_api.schemas.transaction import TransactionHeaderResponse


class ReturnCreate(APIModel):
    original_transaction_id: str
    user_id: str
    reason: str | None = None
    # Optional; when sent it must equal the amount computed from the original sale
    refund_amount: NonNegativeMoney | None = None
    refund_method: Literal["cash", "card"]


class ReturnItemCreate(APIModel):
    return_id: str | None = None
    product_id: str
    # Range is checked against the original sale, not here
    quantity: int
    unit_price: NonNegativeMoney | None = None
    total_price: NonNegativeMoney | None = None


class ReturnCommitRequest(APIModel):
    return_data: ReturnCreate
    items: List[ReturnItemCreate]


class ReturnItemResponse(APIModel):
    id: str
    return_id: str
    product_id: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class ReturnResponse(APIModel):
    id: str
    original_transaction_id: str
    user_id: str
    reason: str | None
    refund_amount: Decimal
    refund_method: str
    created_at: datetime
    items: List[ReturnItemResponse]
    original_transaction: TransactionHeaderResponse | None = None
