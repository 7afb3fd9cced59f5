# pos_api/services/analytics.py

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from pos_api.domain.money import ZERO, to_money
from pos_api.models.products import Product
from pos_api.models.transaction_items import TransactionItem
from pos_api.models.transactions import Transaction


def daily_sales(db: Session, day: date) -> dict:
    start_dt = datetime.combine(day, datetime.min.time())
    end_dt = datetime.combine(day, datetime.max.time())

    totals = [
        Decimal(total)
        for (total,) in db.query(Transaction.total)
        .filter(Transaction.created_at.between(start_dt, end_dt))
        .all()
    ]

    revenue = sum(totals, ZERO)
    count = len(totals)

    return {
        "date": day,
        "revenue": to_money(revenue),
        "transactions": count,
        "average_check": to_money(revenue / count) if count else ZERO,
    }


def top_products(db: Session, limit: int = 10) -> list[dict]:
    sold = func.sum(TransactionItem.quantity).label("sold")

    rows = (
        db.query(TransactionItem.product_id, sold)
        .group_by(TransactionItem.product_id)
        .order_by(sold.desc(), TransactionItem.product_id)
        .limit(limit)
        .all()
    )

    products = {
        product.id: product
        for product in db.query(Product).filter(Product.id.in_([row.product_id for row in rows])).all()
    }

    return [
        {"product": products[row.product_id], "sold": int(row.sold)}
        for row in rows
        if row.product_id in products
    ]
