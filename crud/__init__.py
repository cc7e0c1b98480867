from .inventory import create_item, get_item, list_items, update_item, delete_item, low_stock_items
from .transactions import record_transaction, get_transaction, list_transactions, revise_transaction
from .users import authenticate, get_user, list_users, create_user, update_profile, delete_user
from .reports import dashboard_summary, build_report, generate_excel_report
