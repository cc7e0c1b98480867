from typing import List, Optional, Union
from database import RecordStore
from errors import NotFoundError, ValidationError
from logging_config import get_logger
from models.base import new_id, utcnow
from models.transactions import Transaction, TransactionDirection
from schemas import transactions as schemas
from schemas.users import User
from crud import ledger

logger = get_logger(__name__)


def _validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be a whole number", field="quantity")
    if quantity <= 0:
        raise ValidationError("Quantity must be greater than zero", field="quantity")
    return quantity


def _validate_direction(direction: Union[TransactionDirection, str]) -> TransactionDirection:
    try:
        return TransactionDirection(direction)
    except ValueError:
        raise ValidationError(f"Unknown transaction direction '{direction}'", field="direction")


def record_transaction(store: RecordStore, item_id: str,
                       direction: Union[TransactionDirection, str], quantity: int,
                       acting_user: User, note: Optional[str] = None) -> schemas.Transaction:
    if not item_id:
        raise ValidationError("Please select an item", field="item_id")
    quantity = _validate_quantity(quantity)
    direction = _validate_direction(direction)

    with store.session() as db:
        item = db.get("items", item_id, fresh=True)
        if item is None:
            raise NotFoundError("Item", item_id)

        db_transaction = Transaction(
            id=new_id(),
            item_id=item.id,
            item_name=item.name,
            direction=direction,
            quantity=quantity,
            timestamp=utcnow(),
            user_id=acting_user.id,
            username=acting_user.display_name,
            note=note or None,
        )
        # the availability check and the decrement are one statement in the ledger
        db_transaction = ledger.apply_new(db, db_transaction, enforce_stock=True)

    logger.info("Recorded %s of %d x %s by %s", direction.value, quantity, item.code, acting_user.username)
    return schemas.Transaction.model_validate(db_transaction)


def get_transaction(store: RecordStore, transaction_id: str) -> schemas.Transaction:
    db_transaction = store.get("transactions", transaction_id)
    if db_transaction is None:
        raise NotFoundError("Transaction", transaction_id)
    return schemas.Transaction.model_validate(db_transaction)


def list_transactions(store: RecordStore, search: Optional[str] = None,
                      direction: Optional[TransactionDirection] = None) -> List[schemas.Transaction]:
    """All transactions, newest first."""
    transactions = store.get_all("transactions")

    if direction:
        transactions = [t for t in transactions if t.direction == direction]
    if search:
        term = search.strip().lower()
        transactions = [
            t for t in transactions
            if term in t.item_name.lower() or term in (t.username or "").lower()
        ]

    transactions.sort(key=lambda t: t.timestamp, reverse=True)
    return [schemas.Transaction.model_validate(t) for t in transactions]


def revise_transaction(store: RecordStore, transaction_id: str, new_quantity: int,
                       new_direction: Optional[Union[TransactionDirection, str]] = None) -> schemas.Transaction:
    """
    Correct the quantity (and optionally the direction) of a recorded transaction.

    Restricted to administrators by the caller. The stored values are captured
    before the edit and handed to the ledger so it can undo them first.
    """
    new_quantity = _validate_quantity(new_quantity)

    with store.session() as db:
        db_transaction = db.get("transactions", transaction_id)
        if db_transaction is None:
            raise NotFoundError("Transaction", transaction_id)

        previous_quantity = db_transaction.quantity
        previous_direction = db_transaction.direction
        direction = _validate_direction(new_direction) if new_direction else previous_direction

        if new_quantity == previous_quantity and direction == previous_direction:
            return schemas.Transaction.model_validate(db_transaction)

        # early message only; the ledger re-checks inside its update
        item = db.get("items", db_transaction.item_id, fresh=True)
        if item is not None:
            resulting = (item.current_quantity
                         - ledger.quantity_effect(previous_direction, previous_quantity)
                         + ledger.quantity_effect(direction, new_quantity))
            if resulting < 0:
                raise ValidationError(
                    f"Revision would leave {item.name} at {resulting}", field="quantity"
                )

        db_transaction.quantity = new_quantity
        db_transaction.direction = direction
        db_transaction = ledger.revise_existing(
            db, db_transaction, previous_quantity, previous_direction, enforce_stock=True
        )

    logger.info(
        "Revised transaction %s: %s %d -> %s %d",
        transaction_id, previous_direction.value, previous_quantity, direction.value, new_quantity,
    )
    return schemas.Transaction.model_validate(db_transaction)
