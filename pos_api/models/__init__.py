from pos_api.models.users import User
from pos_api.models.categories import Category
from pos_api.models.products import Product
from pos_api.models.customers import Customer
from pos_api.models.shifts import Shift
from pos_api.models.transactions import Transaction
from pos_api.models.transaction_items import TransactionItem
from pos_api.models.returns import Return, ReturnItem

__all__ = [
    "User",
    "Category",
    "Product",
    "Customer",
    "Shift",
    "Transaction",
    "TransactionItem",
    "Return",
    "ReturnItem",
]
