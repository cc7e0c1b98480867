from sqlalchemy import Column, Integer, String
from database import Base
from models.base import UTCDateTime, new_id, utcnow


class Item(Base):
    __tablename__ = 'items'

    id = Column(String(36), primary_key=True, index=True, default=new_id)
    code = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    unit = Column(String, nullable=False)
    # running total maintained by the ledger, never recomputed from history
    current_quantity = Column(Integer, nullable=False, default=0)
    added_at = Column(UTCDateTime, nullable=False, default=utcnow)
