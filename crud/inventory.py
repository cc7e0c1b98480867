from typing import List, Optional
from config import settings
from database import RecordStore
from errors import NotFoundError, ValidationError
from logging_config import get_logger
from models.base import new_id, utcnow
from models.inventory import Item
from schemas import inventory as schemas

logger = get_logger(__name__)


def create_item(store: RecordStore, item: schemas.ItemCreate) -> schemas.Item:
    name = (item.name or "").strip()
    code = (item.code or "").strip()
    if not name:
        raise ValidationError("Item name is required", field="name")
    if not code:
        raise ValidationError("Item code is required", field="code")
    if item.current_quantity is None or item.current_quantity < 0:
        raise ValidationError("Initial quantity cannot be negative", field="current_quantity")

    db_item = Item(
        id=new_id(),
        code=code,
        name=name,
        category=(item.category or "").strip() or settings.DEFAULT_CATEGORY,
        unit=(item.unit or "").strip() or settings.DEFAULT_UNIT,
        current_quantity=item.current_quantity,
        added_at=utcnow(),
    )
    db_item = store.put("items", db_item)
    logger.info("Created item %s '%s' with quantity %d", db_item.code, db_item.name, db_item.current_quantity)
    return schemas.Item.model_validate(db_item)


def get_item(store: RecordStore, item_id: str) -> schemas.Item:
    db_item = store.get("items", item_id)
    if db_item is None:
        raise NotFoundError("Item", item_id)
    return schemas.Item.model_validate(db_item)


def list_items(store: RecordStore, search: Optional[str] = None) -> List[schemas.Item]:
    items = store.get_all("items")

    if search:
        term = search.strip().lower()
        items = [
            i for i in items
            if term in i.name.lower() or term in i.code.lower() or term in i.category.lower()
        ]

    items.sort(key=lambda i: (i.name.lower(), i.code))
    return [schemas.Item.model_validate(i) for i in items]


def update_item(store: RecordStore, item_id: str, item_update: schemas.ItemUpdate) -> schemas.Item:
    """Edit descriptive fields; quantity only ever changes through the ledger."""
    update_data = item_update.model_dump(exclude_unset=True)
    for field in ("code", "name"):
        if field in update_data and not (update_data[field] or "").strip():
            raise ValidationError(f"Item {field} cannot be empty", field=field)

    with store.session() as db:
        db_item = db.get("items", item_id)
        if db_item is None:
            raise NotFoundError("Item", item_id)

        for key, value in update_data.items():
            value = (value or "").strip()
            if key == "category":
                value = value or settings.DEFAULT_CATEGORY
            elif key == "unit":
                value = value or settings.DEFAULT_UNIT
            setattr(db_item, key, value)
        db_item = db.put("items", db_item)

    return schemas.Item.model_validate(db_item)


def delete_item(store: RecordStore, item_id: str) -> bool:
    deleted = store.delete("items", item_id)
    if not deleted:
        raise NotFoundError("Item", item_id)
    # recorded transactions keep their denormalized item name
    logger.info("Deleted item %s", item_id)
    return True


def low_stock_items(store: RecordStore, threshold: Optional[int] = None) -> List[schemas.Item]:
    if threshold is None:
        threshold = settings.LOW_STOCK_THRESHOLD
    return [i for i in list_items(store) if i.current_quantity < threshold]
