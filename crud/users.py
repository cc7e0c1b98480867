from typing import List, Optional
from database import RecordStore
from errors import CredentialsInvalid, NotFoundError, ValidationError
from logging_config import get_logger
from models.base import new_id
from models.users import User, UserRole
from schemas import users as schemas

logger = get_logger(__name__)


def authenticate(store: RecordStore, username: str, password: str) -> schemas.User:
    """Exact, case-sensitive match on username and plain-text password."""
    db_user = store.find_one("users", username=username) if username else None
    if db_user is None or db_user.password != password:
        logger.warning("Failed login for '%s'", username)
        raise CredentialsInvalid()
    logger.info("User '%s' logged in", username)
    return schemas.User.model_validate(db_user)


def get_user(store: RecordStore, user_id: str) -> schemas.User:
    db_user = store.get("users", user_id)
    if db_user is None:
        raise NotFoundError("User", user_id)
    return schemas.User.model_validate(db_user)


def list_users(store: RecordStore) -> List[schemas.User]:
    users = sorted(store.get_all("users"), key=lambda u: u.username)
    return [schemas.User.model_validate(u) for u in users]


def create_user(store: RecordStore, user: schemas.UserCreate) -> schemas.User:
    username = (user.username or "").strip()
    if not username:
        raise ValidationError("Username cannot be empty", field="username")
    if not user.password:
        raise ValidationError("Password cannot be empty", field="password")

    with store.session() as db:
        if db.find_one("users", username=username) is not None:
            raise ValidationError("This username is already taken", field="username")
        db_user = db.put("users", User(
            id=new_id(),
            username=username,
            password=user.password,
            role=user.role,
            display_name=(user.display_name or "").strip() or username,
        ))

    logger.info("Created %s user '%s'", db_user.role.value, username)
    return schemas.User.model_validate(db_user)


def update_profile(store: RecordStore, user_id: str, display_name: str, username: str,
                   password: Optional[str] = None,
                   confirm_password: Optional[str] = None) -> schemas.User:
    """
    Change display name, username and optionally password.

    The id stays the same, so a rename is one write rather than a
    delete-then-insert of the whole record.
    """
    username = (username or "").strip()
    if not username:
        raise ValidationError("Username cannot be empty", field="username")
    if password and confirm_password is not None and password != confirm_password:
        raise ValidationError("Passwords do not match", field="confirm_password")

    with store.session() as db:
        db_user = db.get("users", user_id)
        if db_user is None:
            raise NotFoundError("User", user_id)

        if username != db_user.username:
            holder = db.find_one("users", username=username)
            if holder is not None and holder.id != db_user.id:
                raise ValidationError("This username is already taken", field="username")
            logger.info("Renaming user '%s' to '%s'", db_user.username, username)

        db_user.username = username
        db_user.display_name = (display_name or "").strip() or db_user.display_name
        if password:
            db_user.password = password
        db_user = db.put("users", db_user)

    return schemas.User.model_validate(db_user)


def delete_user(store: RecordStore, user_id: str) -> bool:
    with store.session() as db:
        db_user = db.get("users", user_id)
        if db_user is None:
            raise NotFoundError("User", user_id)
        if db_user.role == UserRole.ADMIN:
            admins = [u for u in db.get_all("users") if u.role == UserRole.ADMIN]
            if len(admins) <= 1:
                raise ValidationError("Cannot delete the last administrator")
        db.delete("users", user_id)

    logger.info("Deleted user %s", user_id)
    return True
