from pydantic import TypeAdapter

from reflectnote.core import config
from reflectnote.models.reflection import Reflection
from reflectnote.repositories.base import CollectionRepository

_reflections_adapter = TypeAdapter(list[Reflection])


class ReflectionRepository(CollectionRepository):

    def list_reflections(self) -> list[Reflection]:
        return self._load(config.REFLECTIONS_KEY, _reflections_adapter, [])

    def save_reflections(self, reflections: list[Reflection]) -> None:
        self.store.set(config.REFLECTIONS_KEY, self._dump(_reflections_adapter, reflections))

    def add_reflection(self, reflection: Reflection) -> Reflection:
        with self.store.lock:
            self.save_reflections([*self.list_reflections(), reflection])
        return reflection

    def update_reflection_feedback(self, reflection_id: str, feedback: str) -> None:
        with self.store.lock:
            self.save_reflections([
                reflection.model_copy(update={'teacher_feedback': feedback})
                if reflection.id == reflection_id else reflection
                for reflection in self.list_reflections()
            ])
