from .inventory import Item
from .transactions import Transaction, TransactionDirection
from .users import User, UserRole
