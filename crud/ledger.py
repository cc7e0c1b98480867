"""
Stock ledger: keeps every item's running quantity in step with its transactions.

The ledger is snapshot-plus-delta. Each item stores its current quantity and
every write adjusts that snapshot; nothing is replayed from the transaction
history, so a lost or corrupted item row cannot be rebuilt from here.

Adjustments are single UPDATE statements where the database adds the delta
to the stored value, so two units of work moving the same item cannot
overwrite each other. Stock checks ride on the same statement.

All functions take a ``StoreSession`` and never commit: the caller's unit of
work decides when the item update and the transaction record land together.
"""
from typing import Optional
from config import settings
from database import StoreSession
from errors import NotFoundError, ValidationError
from logging_config import get_logger
from models.inventory import Item
from models.transactions import Transaction, TransactionDirection

logger = get_logger(__name__)


def quantity_effect(direction: TransactionDirection, quantity: int) -> int:
    """Signed change a movement makes to on-hand stock."""
    if direction == TransactionDirection.INBOUND:
        return quantity
    return -quantity


def available_quantity(db: StoreSession, item_id: str) -> int:
    # re-read from the database, not from whatever the session already holds
    item = db.get("items", item_id, fresh=True)
    if item is None:
        raise NotFoundError("Item", item_id)
    return item.current_quantity


def _adjust(db: StoreSession, item_id: str, delta: int, enforce_stock: bool = False) -> Optional[Item]:
    """
    Move an item's quantity by ``delta``; returns the re-read item, or None if it is missing.

    With ``enforce_stock`` the row only changes when the result stays at or
    above zero, otherwise ValidationError is raised and nothing is written.
    """
    criteria = [Item.current_quantity + delta >= 0] if enforce_stock else []
    changed = db.update("items", item_id, {"current_quantity": Item.current_quantity + delta}, *criteria)

    item = db.get("items", item_id, fresh=True)
    if item is None:
        return None
    if not changed:
        logger.warning(
            "Rejected change of %+d to %s: only %d on hand", delta, item.code, item.current_quantity
        )
        raise ValidationError(
            f"Requested quantity exceeds available stock ({item.current_quantity})", field="quantity"
        )

    logger.info("Item %s (%s): quantity %+d -> %d", item.code, item.id, delta, item.current_quantity)
    return item


def apply_new(db: StoreSession, transaction: Transaction,
              reject_orphans: Optional[bool] = None,
              enforce_stock: bool = False) -> Transaction:
    """
    Apply a transaction that is not yet reflected anywhere.

    The item is updated first, then the transaction is stored. When the item
    does not exist the transaction is still stored and no quantity changes,
    unless ``reject_orphans`` (default from settings) asks for a hard failure.
    ``enforce_stock`` refuses a movement that would take the item below zero.
    """
    if reject_orphans is None:
        reject_orphans = settings.REJECT_ORPHAN_TRANSACTIONS

    effect = quantity_effect(transaction.direction, transaction.quantity)
    item = _adjust(db, transaction.item_id, effect, enforce_stock)
    if item is None:
        if reject_orphans:
            raise NotFoundError("Item", transaction.item_id)
        logger.warning(
            "Transaction %s references missing item %s; quantity not updated",
            transaction.id, transaction.item_id,
        )

    return db.put("transactions", transaction)


def revise_existing(db: StoreSession, transaction: Transaction,
                    previous_quantity: int,
                    previous_direction: TransactionDirection,
                    previous_item_id: Optional[str] = None,
                    enforce_stock: bool = False) -> Transaction:
    """
    Re-derive stock after an edit to an already-applied transaction.

    ``transaction`` carries the new values; the previous quantity, direction
    and (optionally) item must be captured by the caller before the edit.
    The old effect is undone first and the new one applied second, so a
    direction flip or an item change nets out correctly.

    The stored row is claimed with a conditional UPDATE on the previous
    values, so a second revision racing on stale values fails instead of
    undoing the same effect twice.
    """
    old_item_id = previous_item_id or transaction.item_id

    claimed = db.update(
        "transactions", transaction.id,
        {
            "quantity": transaction.quantity,
            "direction": transaction.direction,
            "item_id": transaction.item_id,
        },
        Transaction.quantity == previous_quantity,
        Transaction.direction == previous_direction,
        Transaction.item_id == old_item_id,
    )
    if not claimed:
        logger.warning("Revision of %s lost a race with another edit", transaction.id)
        raise ValidationError("Transaction was changed by another user; reload and try again")

    if _adjust(db, old_item_id, -quantity_effect(previous_direction, previous_quantity)) is None:
        logger.warning("Revision of %s: previous item %s is missing", transaction.id, old_item_id)

    new_effect = quantity_effect(transaction.direction, transaction.quantity)
    if _adjust(db, transaction.item_id, new_effect, enforce_stock) is None:
        logger.warning("Revision of %s: item %s is missing", transaction.id, transaction.item_id)

    return db.put("transactions", transaction)
