# schemas/analytics.py

import datetime as dt
from decimal import Decimal

from pos_api.schemas.base import APIModel
from pos_api.schemas.product import ProductResponse


class DailySalesResponse(APIModel):
    date: dt.date
    revenue: Decimal
    transactions: int
    average_check: Decimal


class TopProductResponse(APIModel):
    product: ProductResponse
    sold: int
