from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import get_settings
from app.core.exceptions import ConflictError, PersistenceError

logger = logging.getLogger(__name__)

settings = get_settings()

_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, pool_pre_ping=True, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def commit_or_raise(db: Session, *, operation: str, conflict_message: str | None = None) -> None:
    """Commit pending work as one transaction, rolling back on any store failure.

    Uniqueness violations become `ConflictError` when `conflict_message` is given;
    everything else is logged and surfaced as a generic `PersistenceError`.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if conflict_message is not None:
            raise ConflictError(conflict_message) from exc
        logger.exception("%s failed on integrity check", operation)
        raise PersistenceError() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("%s failed", operation)
        raise PersistenceError() from exc


@contextmanager
def persistence_guard(db: Session, *, operation: str) -> Iterator[None]:
    """Surface any store failure inside the block as `PersistenceError`.

    Application errors raised inside the block pass through untouched.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("%s failed", operation)
        raise PersistenceError() from exc
