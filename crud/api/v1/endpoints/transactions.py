from fastapi import APIRouter, Depends
from typing import List, Optional
from database import RecordStore, get_store
from models.transactions import TransactionDirection
from schemas.transactions import Transaction, TransactionCreate, TransactionRevision
from schemas.users import User
from crud import transactions
from crud.api.v1.endpoints.users import get_current_user, require_admin

router = APIRouter()

@router.post("/", response_model=Transaction, status_code=201)
def record_transaction(transaction: TransactionCreate, current_user: User = Depends(get_current_user),
                       store: RecordStore = Depends(get_store)):
    return transactions.record_transaction(
        store,
        transaction.item_id,
        transaction.direction,
        transaction.quantity,
        current_user,
        note=transaction.note,
    )

@router.get("/", response_model=List[Transaction])
def list_transactions(search: Optional[str] = None,
                      direction: Optional[TransactionDirection] = None,
                      store: RecordStore = Depends(get_store)):
    return transactions.list_transactions(store, search=search, direction=direction)

@router.get("/{transaction_id}", response_model=Transaction)
def get_transaction(transaction_id: str, store: RecordStore = Depends(get_store)):
    return transactions.get_transaction(store, transaction_id)

@router.put("/{transaction_id}", response_model=Transaction)
def revise_transaction(transaction_id: str, revision: TransactionRevision,
                       admin: User = Depends(require_admin), store: RecordStore = Depends(get_store)):
    return transactions.revise_transaction(store, transaction_id, revision.quantity, revision.direction)
