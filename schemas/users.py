from pydantic import BaseModel
from typing import Optional
from models.users import UserRole


class LoginRequest(BaseModel):
    username: str
    password: str

class UserCreate(BaseModel):
    username: str
    password: str
    display_name: str
    role: UserRole = UserRole.USER

class ProfileUpdate(BaseModel):
    display_name: str
    username: str
    password: Optional[str] = None
    confirm_password: Optional[str] = None

class User(BaseModel):
    """User snapshot returned to callers; the password never leaves the core."""
    id: str
    username: str
    role: UserRole
    display_name: str

    class Config:
        from_attributes = True
