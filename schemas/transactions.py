from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from models.transactions import TransactionDirection


class TransactionCreate(BaseModel):
    item_id: str
    direction: TransactionDirection
    quantity: int
    note: Optional[str] = None

class TransactionRevision(BaseModel):
    quantity: int
    direction: Optional[TransactionDirection] = None

class Transaction(BaseModel):
    id: str
    item_id: str
    item_name: str
    direction: TransactionDirection
    quantity: int
    timestamp: datetime
    user_id: Optional[str] = None
    username: Optional[str] = None
    note: Optional[str] = None

    class Config:
        from_attributes = True
