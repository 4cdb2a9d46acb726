"""Class model definitions."""

from reflectnote.models.base import RecordModel


class ClassInfo(RecordModel):
    """Represents a homeroom class and its reflection target."""

    id: str
    name: str
    year: str
    teacher_id: str
    target_days: int
