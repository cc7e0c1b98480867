from fastapi import APIRouter, Depends, Header, HTTPException
from typing import List
from database import RecordStore, get_store
from errors import NotFoundError
from models.users import UserRole
from schemas.users import User, UserCreate, ProfileUpdate, LoginRequest
from crud import users

router = APIRouter()


def get_current_user(x_user_id: str = Header(...), store: RecordStore = Depends(get_store)) -> User:
    try:
        return users.get_user(store, x_user_id)
    except NotFoundError:
        raise HTTPException(status_code=401, detail="Unknown user")


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Administrator access required")
    return current_user


@router.post("/login", response_model=User)
def login(credentials: LoginRequest, store: RecordStore = Depends(get_store)):
    return users.authenticate(store, credentials.username, credentials.password)

@router.get("/me", response_model=User)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user

@router.put("/me", response_model=User)
def update_profile(profile: ProfileUpdate, current_user: User = Depends(get_current_user),
                   store: RecordStore = Depends(get_store)):
    return users.update_profile(
        store,
        current_user.id,
        display_name=profile.display_name,
        username=profile.username,
        password=profile.password,
        confirm_password=profile.confirm_password,
    )

@router.get("/", response_model=List[User])
def list_users(admin: User = Depends(require_admin), store: RecordStore = Depends(get_store)):
    return users.list_users(store)

@router.post("/", response_model=User, status_code=201)
def create_user(user: UserCreate, admin: User = Depends(require_admin), store: RecordStore = Depends(get_store)):
    return users.create_user(store, user)

@router.delete("/{user_id}")
def delete_user(user_id: str, admin: User = Depends(require_admin), store: RecordStore = Depends(get_store)):
    users.delete_user(store, user_id)
    return {"status": "success"}
