import logging
from typing import Any

from pydantic import TypeAdapter

from reflectnote.core import config
from reflectnote.models.class_info import ClassInfo
from reflectnote.repositories.base import CollectionRepository
from reflectnote.repositories.users import UserRepository
from reflectnote.storage import RecordStore

logger = logging.getLogger(__name__)

_classes_adapter = TypeAdapter(list[ClassInfo])


class ClassRepository(CollectionRepository):

    def __init__(self, store: RecordStore, users: UserRepository | None = None, **kwargs: Any) -> None:
        super().__init__(store, **kwargs)
        self.users = users or UserRepository(store, **kwargs)

    def list_classes(self) -> list[ClassInfo]:
        return self._load(config.CLASSES_KEY, _classes_adapter, [])

    def save_classes(self, classes: list[ClassInfo]) -> None:
        self.store.set(config.CLASSES_KEY, self.dump_classes(classes))

    @staticmethod
    def dump_classes(classes: list[ClassInfo]) -> str:
        return CollectionRepository._dump(_classes_adapter, classes)

    def add_class(self, name: str, year: str, teacher_id: str, target_days: int) -> ClassInfo:
        class_info = ClassInfo(
            id=self.id_factory(),
            name=name,
            year=year,
            teacher_id=teacher_id,
            target_days=target_days,
        )
        with self.store.lock:
            self.save_classes([*self.list_classes(), class_info])
        return class_info

    def delete_class(self, class_id: str) -> None:
        """Remove a class and detach its students; students are kept."""
        with self.store.lock:
            remaining = [class_info for class_info in self.list_classes() if class_info.id != class_id]
            users = self.users.clear_class_references(class_id)
            self.store.set_many({
                config.CLASSES_KEY: self.dump_classes(remaining),
                config.USERS_KEY: self.users.dump_users(users),
            })
        logger.info('Deleted class %s', class_id)
