from .inventory import Item, ItemCreate, ItemUpdate
from .transactions import Transaction, TransactionCreate, TransactionRevision
from .users import User, UserCreate, ProfileUpdate, LoginRequest
from .reports import DashboardSummary, Report, ReportRow, ReportType
