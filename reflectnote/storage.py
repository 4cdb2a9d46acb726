"""Key-value record stores.

Every collection the repositories manage lives under one fixed key as a
single JSON text blob. Stores only move whole blobs around; they know nothing
about what is inside them.

Repositories assume a single writer. Inside one process they serialize their
read-modify-write sequences on ``store.lock``; nothing guards against a second
process writing to the same medium.
"""

import logging
from collections.abc import Mapping
from threading import RLock

from sqlalchemy.exc import SQLAlchemyError

from reflectnote.database import SessionLocal
from reflectnote.models.record import Record

logger = logging.getLogger(__name__)


class RecordStore:
    """Synchronous get/set/remove of serialized collections by key."""

    def __init__(self) -> None:
        self.lock = RLock()

    def get(self, key: str) -> str | None:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def set_many(self, values: Mapping[str, str | None]) -> None:
        """Write several keys together. A ``None`` value removes the key."""
        for key, value in values.items():
            if value is None:
                self.remove(key)
            else:
                self.set(key, value)


class MemoryRecordStore(RecordStore):
    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        super().__init__()
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class SqlRecordStore(RecordStore):
    """Stores each key as a row of the ``records`` table."""

    def __init__(self, session_factory=SessionLocal) -> None:
        super().__init__()
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        db = self._session_factory()
        try:
            record = db.query(Record).filter(Record.key == key).first()
            return record.value if record else None
        finally:
            db.close()

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def remove(self, key: str) -> None:
        self.set_many({key: None})

    def set_many(self, values: Mapping[str, str | None]) -> None:
        db = self._session_factory()
        try:
            for key, value in values.items():
                if value is None:
                    db.query(Record).filter(Record.key == key).delete()
                else:
                    db.merge(Record(key=key, value=value))
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception('Failed to write records %s', sorted(values))
            raise
        finally:
            db.close()
