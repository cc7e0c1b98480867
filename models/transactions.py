from sqlalchemy import Column, Integer, String, Enum
from enum import Enum as PyEnum
from database import Base
from models.base import UTCDateTime, new_id, utcnow

class TransactionDirection(PyEnum):
    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, index=True, default=new_id)
    # no foreign key: a transaction may outlive (or predate) its item
    item_id = Column(String(36), nullable=False, index=True)
    item_name = Column(String, nullable=False)
    direction = Column(Enum(TransactionDirection), nullable=False)
    quantity = Column(Integer, nullable=False)
    timestamp = Column(UTCDateTime, nullable=False, default=utcnow, index=True)
    user_id = Column(String(36), nullable=True)
    username = Column(String, nullable=True)
    note = Column(String, nullable=True)
