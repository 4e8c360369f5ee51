from .auth import User, SessionToken
from .catalog import Product, Category
from .shifts import Shift
from .sales import Transaction, TransactionItem

__all__ = [
    'User', 'SessionToken',
    'Product', 'Category',
    'Shift',
    'Transaction', 'TransactionItem',
]
