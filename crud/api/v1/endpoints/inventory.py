from fastapi import APIRouter, Depends
from typing import List, Optional
from database import RecordStore, get_store
from schemas.inventory import Item, ItemCreate, ItemUpdate
from schemas.users import User
from crud import inventory
from crud.api.v1.endpoints.users import get_current_user, require_admin

router = APIRouter()

@router.post("/", response_model=Item, status_code=201)
def create_item(item: ItemCreate, current_user: User = Depends(get_current_user),
                store: RecordStore = Depends(get_store)):
    return inventory.create_item(store, item)

@router.get("/", response_model=List[Item])
def list_items(search: Optional[str] = None, store: RecordStore = Depends(get_store)):
    return inventory.list_items(store, search)

@router.get("/low-stock", response_model=List[Item])
def list_low_stock_items(threshold: Optional[int] = None, store: RecordStore = Depends(get_store)):
    return inventory.low_stock_items(store, threshold)

@router.get("/{item_id}", response_model=Item)
def get_item(item_id: str, store: RecordStore = Depends(get_store)):
    return inventory.get_item(store, item_id)

@router.put("/{item_id}", response_model=Item)
def update_item(item_id: str, item_update: ItemUpdate, admin: User = Depends(require_admin),
                store: RecordStore = Depends(get_store)):
    return inventory.update_item(store, item_id, item_update)

@router.delete("/{item_id}")
def delete_item(item_id: str, admin: User = Depends(require_admin), store: RecordStore = Depends(get_store)):
    inventory.delete_item(store, item_id)
    return {"status": "success"}
