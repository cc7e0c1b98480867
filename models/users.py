from sqlalchemy import Column, String, Enum
from enum import Enum as PyEnum
from database import Base
from models.base import new_id

class UserRole(PyEnum):
    ADMIN = "ADMIN"
    USER = "USER"


class User(Base):
    __tablename__ = "users"

    # stable id; the username can be renamed without changing identity
    id = Column(String(36), primary_key=True, index=True, default=new_id)
    username = Column(String, nullable=False, unique=True, index=True)
    # stored in plain text, hashing is not implemented
    password = Column(String, nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.USER)
    display_name = Column(String, nullable=False)
