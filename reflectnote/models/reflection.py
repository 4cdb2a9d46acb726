"""Reflection model definitions."""

from reflectnote.models.base import RecordModel


class Reflection(RecordModel):
    """A submitted reflection. Content fields beyond these are kept as-is."""

    id: str
    student_id: str | None = None
    class_id: str | None = None
    date: str | None = None
    content: str = ''
    teacher_feedback: str | None = None
