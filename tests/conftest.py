"""
Pytest fixtures for the inventory test suite.

Every test gets its own SQLite file under tmp_path, initialized and seeded
with the default administrator, so tests never share state.
"""

import pytest
from fastapi.testclient import TestClient

from config import settings
from database import RecordStore
from models.base import new_id, utcnow
from models.inventory import Item
from models.users import UserRole
from schemas.users import User, UserCreate
from crud import users


@pytest.fixture
def store(tmp_path) -> RecordStore:
    record_store = RecordStore(f"sqlite:///{tmp_path / 'inventory.db'}")
    record_store.init(
        admin_username=settings.ADMIN_USERNAME,
        admin_password=settings.ADMIN_PASSWORD,
        admin_display_name=settings.ADMIN_DISPLAY_NAME,
    )
    yield record_store
    record_store.dispose()


@pytest.fixture
def admin(store) -> User:
    return users.authenticate(store, "admin", "0000")


@pytest.fixture
def clerk(store) -> User:
    return users.create_user(store, UserCreate(
        username="nurse",
        password="secret",
        display_name="Ward Nurse",
        role=UserRole.USER,
    ))


@pytest.fixture
def make_item(store):
    """Insert an item directly with a chosen starting quantity."""

    def _make(code: str = "M-001", quantity: int = 0, name: str = None,
              category: str = "Consumables", unit: str = "Box") -> Item:
        return store.put("items", Item(
            id=new_id(),
            code=code,
            name=name or f"Item {code}",
            category=category,
            unit=unit,
            current_quantity=quantity,
            added_at=utcnow(),
        ))

    return _make


@pytest.fixture
def quantity_of(store):
    def _quantity(item_id: str) -> int:
        return store.get("items", item_id).current_quantity

    return _quantity


@pytest.fixture
def client(store) -> TestClient:
    from main import create_app

    return TestClient(create_app(store))
