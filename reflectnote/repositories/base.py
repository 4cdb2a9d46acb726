import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter

from reflectnote.storage import RecordStore


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CollectionRepository:
    """Reads and writes whole collections of one record type."""

    def __init__(
        self,
        store: RecordStore,
        *,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.id_factory = id_factory
        self.clock = clock

    def _load(self, key: str, adapter: TypeAdapter, default: Any) -> Any:
        raw = self.store.get(key)
        if raw is None:
            return default
        return adapter.validate_json(raw)

    @staticmethod
    def _dump(adapter: TypeAdapter, value: Any) -> str:
        return adapter.dump_json(value, by_alias=True).decode()
