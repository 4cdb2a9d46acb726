"""User model definitions."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from reflectnote.models.base import RecordModel


class UserRole(str, Enum):
    ADMIN = 'admin'
    TEACHER = 'teacher'
    STUDENT = 'student'


class Lifecycle(str, Enum):
    """Account lifecycle derived from the persisted flags."""
    PENDING_FIRST_LOGIN = 'pending_first_login'
    ACTIVE = 'active'
    INACTIVE = 'inactive'


class User(RecordModel):
    """Represents an application account of any role."""

    id: str
    role: UserRole
    name: str = ''
    login_id: str = ''
    student_id: str | None = None
    password_hash: str
    is_first_login: bool = True
    is_active: bool = True
    class_id: str | None = None

    @property
    def lifecycle(self) -> Lifecycle:
        if not self.is_active:
            return Lifecycle.INACTIVE
        if self.is_first_login:
            return Lifecycle.PENDING_FIRST_LOGIN
        return Lifecycle.ACTIVE

    def is_active_student(self) -> bool:
        return self.role == UserRole.STUDENT and self.is_active

    # Transitions. isFirstLogin survives deactivate/reactivate, so an account
    # that never changed its password comes back still pending.

    def deactivated(self) -> 'User':
        return self.model_copy(update={'is_active': False})

    def reactivated(self) -> 'User':
        return self.model_copy(update={'is_active': True})

    def password_reset(self, sentinel_hash: str) -> 'User':
        return self.model_copy(update={'password_hash': sentinel_hash, 'is_first_login': True})

    def first_login_completed(self, password_hash: str) -> 'User':
        return self.model_copy(update={'password_hash': password_hash, 'is_first_login': False})

    def without_class(self) -> 'User':
        return self.model_copy(update={'class_id': None})


class StudentData(BaseModel):
    """Input for a single student insert (no id) or update (id given)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str | None = None
    name: str | None = None
    student_id: str | None = None
    class_id: str | None = None
    login_id: str | None = None
    password_hash: str | None = None
    is_first_login: bool | None = None
    is_active: bool | None = None


class StudentImport(BaseModel):
    """One row of a roster import."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    student_id: str
    class_id: str | None = None


class BulkImportResult(BaseModel):
    count: int
    duplicates: list[str]
