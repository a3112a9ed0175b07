import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.errors import StorageError
from app.models.kv_entry import KeyValueEntry

logger = logging.getLogger(__name__)


class KeyValueStore:
    """String-to-string store backed by the `kv_entries` table.

    Every `set` runs in its own transaction and is committed before it
    returns, so callers can update in-memory state only after a write landed.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        db: Session = self._session_factory()
        try:
            entry = db.get(KeyValueEntry, key)
            return entry.value if entry else None
        except SQLAlchemyError as exc:
            logger.error("Reading %r from the local store failed: %s", key, exc)
            raise StorageError("Could not read local data") from exc
        finally:
            db.close()

    def set(self, key: str, value: str) -> None:
        db: Session = self._session_factory()
        try:
            entry = db.get(KeyValueEntry, key)
            if entry:
                entry.value = value
            else:
                db.add(KeyValueEntry(key=key, value=value))
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Writing %r to the local store failed: %s", key, exc)
            raise StorageError("Could not save local data") from exc
        finally:
            db.close()
