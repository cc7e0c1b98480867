from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class ItemBase(BaseModel):
    code: str
    name: str
    category: Optional[str] = None
    unit: Optional[str] = None

class ItemCreate(ItemBase):
    current_quantity: int = Field(0, ge=0)

class ItemUpdate(BaseModel):
    code: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None

class Item(ItemBase):
    id: str
    category: str
    unit: str
    current_quantity: int
    added_at: datetime

    class Config:
        from_attributes = True
