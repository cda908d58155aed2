import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from sqlalchemy import DateTime, create_engine
from sqlalchemy.dialects import mysql
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from supportdesk.core.config import settings
from supportdesk.core.errors import StorageFailure

logger = logging.getLogger(__name__)

Base = declarative_base()

# Naive UTC with microseconds; MySQL needs fsp=6 or DATETIME truncates to seconds
Timestamp = DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def make_engine(url: str, **kwargs):
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, **kwargs)


engine = make_engine(settings.SQLALCHEMY_DATABASE_URL)
SessionLocal = sessionmaker(autoflush=False, expire_on_commit=False, bind=engine)


def init_db(bind=None) -> None:
    # Import models so their tables register on Base.metadata
    from supportdesk.models import message, ticket, user  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit everything done inside the block, or nothing.

    SQLAlchemy errors are rolled back and re-raised as ``StorageFailure``;
    any other exception is rolled back and propagated unchanged.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Storage operation failed, transaction rolled back")
        raise StorageFailure("Storage operation failed") from exc
    except Exception:
        db.rollback()
        raise
