from pydantic import BaseModel
from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from schemas.inventory import Item

class ReportType(str, Enum):
    DAILY = "DAILY"
    INVENTORY = "INVENTORY"
    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"

class DashboardSummary(BaseModel):
    day: date
    total_items: int
    inbound_today: int
    outbound_today: int
    low_stock_count: int
    low_stock_threshold: int
    low_stock_items: List[Item]

class ReportRow(BaseModel):
    """One printable line: a stock line for INVENTORY, a movement otherwise."""
    code: Optional[str] = None
    name: str
    category: Optional[str] = None
    unit: Optional[str] = None
    direction: Optional[str] = None
    quantity: int
    timestamp: Optional[datetime] = None
    username: Optional[str] = None

class Report(BaseModel):
    report_type: ReportType
    title: str
    generated_at: datetime
    rows: List[ReportRow]
    total_quantity: int
    totals_by_direction: dict
