# pos_api/services/stock.py

from sqlalchemy import case, update
from sqlalchemy.orm import Session

from pos_api.core.exceptions import NotFoundError
from pos_api.models.products import Product


def adjust_stock(db: Session, product_id: str, delta: int) -> None:
    """Add ``delta`` to a product's stock in one statement, floored at zero.

    Must run inside the caller's unit of work; it never commits.
    """
    new_stock = Product.stock + delta

    result = db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(stock=case((new_stock < 0, 0), else_=new_stock))
        .execution_options(synchronize_session=False)
    )

    if result.rowcount != 1:
        raise NotFoundError(f"Product {product_id} not found")
