from contextlib import contextmanager
from typing import Iterator, List, Optional
from fastapi import Request
from sqlalchemy import create_engine, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from errors import StoreUnavailable, ValidationError
from logging_config import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def _model_for(collection: str):
    # collections are the mapped table names: items, transactions, users
    for mapper in Base.registry.mappers:
        if mapper.class_.__tablename__ == collection:
            return mapper.class_
    raise KeyError(f"Unknown collection '{collection}'")


class StoreSession:
    """Key-value view over one SQLAlchemy session (one unit of work)."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, collection: str, key: str, fresh: bool = False):
        """Load one entity by key; ``fresh`` bypasses the session's identity map."""
        if not key:
            return None
        return self.session.get(_model_for(collection), key, populate_existing=fresh)

    def get_all(self, collection: str) -> List:
        return self.session.query(_model_for(collection)).all()

    def find_one(self, collection: str, **attrs):
        return self.session.query(_model_for(collection)).filter_by(**attrs).first()

    def put(self, collection: str, entity):
        """Insert or replace ``entity`` by primary key; returns the persistent instance."""
        if not isinstance(entity, _model_for(collection)):
            raise TypeError(f"{type(entity).__name__} does not belong to '{collection}'")
        entity = self.session.merge(entity)
        self.session.flush()
        return entity

    def update(self, collection: str, key: str, values: dict, *criteria) -> bool:
        """
        Update one row in a single statement, evaluated by the database.

        ``values`` may hold column expressions (``Item.current_quantity + 1``)
        and ``criteria`` extra WHERE conditions. Returns False when no row
        matched. Objects already loaded in this session are not refreshed;
        re-read them with ``get(..., fresh=True)``.
        """
        if not key:
            return False
        model = _model_for(collection)
        statement = (
            update(model)
            .where(model.id == key, *criteria)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(statement).rowcount > 0

    def delete(self, collection: str, key: str) -> bool:
        entity = self.get(collection, key)
        if entity is None:
            return False
        self.session.delete(entity)
        self.session.flush()
        return True


class RecordStore:
    """
    Local persistence for the items, transactions and users collections.

    Construct once, call ``init()`` once, then pass the handle to the services.
    Every top-level method runs in its own unit of work; use ``session()`` to
    group several operations into a single commit.
    """

    def __init__(self, url: str, echo: bool = False):
        # sqlite: shared across the threadpool, writers wait on the file lock
        connect_args = {"check_same_thread": False, "timeout": 30} if url.startswith("sqlite") else {}
        self.url = url
        try:
            self.engine = create_engine(url, echo=echo, connect_args=connect_args)
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Invalid database URL: {e}") from e
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )
        self.initialized = False

    def init(self, admin_username: str = "admin", admin_password: str = "0000",
             admin_display_name: str = "System Administrator") -> None:
        import models  # noqa: F401  registers the mapped collections

        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            logger.error("Database initialization failed: %s", e)
            raise StoreUnavailable(f"Database initialization failed: {e}") from e

        self._seed_initial_admin(admin_username, admin_password, admin_display_name)
        self.initialized = True
        logger.info("Record store ready at %s", self.engine.url.render_as_string(hide_password=True))

    def _seed_initial_admin(self, username: str, password: str, display_name: str) -> None:
        from models.users import User, UserRole

        with self.session() as db:
            if db.find_one("users", role=UserRole.ADMIN) is not None:
                return
            if db.find_one("users", username=username) is not None:
                # the name is held by a non-admin account; leave it alone
                logger.warning("No administrator exists and username '%s' is taken", username)
                return
            db.put("users", User(
                username=username,
                password=password,
                role=UserRole.ADMIN,
                display_name=display_name,
            ))
            logger.info("Seeded default administrator '%s'", username)

    @contextmanager
    def session(self) -> Iterator[StoreSession]:
        db = self.SessionLocal()
        try:
            yield StoreSession(db)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ValidationError(f"Record conflicts with an existing entry: {e.orig}") from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Store operation failed: %s", e)
            raise StoreUnavailable(f"Store operation failed: {e}") from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def get(self, collection: str, key: str):
        with self.session() as db:
            return db.get(collection, key)

    def get_all(self, collection: str) -> List:
        with self.session() as db:
            return db.get_all(collection)

    def find_one(self, collection: str, **attrs):
        with self.session() as db:
            return db.find_one(collection, **attrs)

    def put(self, collection: str, entity):
        with self.session() as db:
            return db.put(collection, entity)

    def delete(self, collection: str, key: str) -> bool:
        with self.session() as db:
            return db.delete(collection, key)

    def dispose(self) -> None:
        self.engine.dispose()


def get_store(request: Request) -> RecordStore:
    store: Optional[RecordStore] = getattr(request.app.state, "store", None)
    if store is None or not store.initialized:
        raise StoreUnavailable("Record store is not initialized")
    return store
