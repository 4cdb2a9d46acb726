"""Account roster persistence and lifecycle rules.

The roster is stored as one JSON list. Students are unique per
``(class_id, student_id)`` among *active* students only; deactivated
accounts keep their ids and never block a new registration.
"""

import logging
from collections.abc import Callable, Iterable

from pydantic import TypeAdapter

from reflectnote.core import config
from reflectnote.errors import DuplicateStudentIdError
from reflectnote.models.user import (
    BulkImportResult,
    StudentData,
    StudentImport,
    User,
    UserRole,
)
from reflectnote.repositories.base import CollectionRepository

logger = logging.getLogger(__name__)

_users_adapter = TypeAdapter(list[User])


def has_active_student(users: Iterable[User], class_id: str | None, student_id: str | None) -> bool:
    return any(
        user.is_active_student()
        and user.class_id == class_id
        and user.student_id == student_id
        for user in users
    )


def has_admin(users: Iterable[User]) -> bool:
    return any(user.role == UserRole.ADMIN for user in users)


class UserRepository(CollectionRepository):

    def list_users(self) -> list[User]:
        return self._load(config.USERS_KEY, _users_adapter, [])

    def save_users(self, users: list[User]) -> None:
        self.store.set(config.USERS_KEY, self.dump_users(users))

    @staticmethod
    def dump_users(users: list[User]) -> str:
        return CollectionRepository._dump(_users_adapter, users)

    def get_user(self, user_id: str) -> User | None:
        return next((user for user in self.list_users() if user.id == user_id), None)

    def add_teacher(self, name: str, login_id: str, password_hash: str) -> User:
        # login_id uniqueness is left to the caller.
        teacher = User(
            id=self.id_factory(),
            role=UserRole.TEACHER,
            name=name,
            login_id=login_id,
            password_hash=password_hash,
            is_first_login=True,
            is_active=True,
        )
        with self.store.lock:
            self.save_users([*self.list_users(), teacher])
        return teacher

    def _update_user(self, user_id: str, change: Callable[[User], User]) -> None:
        with self.store.lock:
            users = self.list_users()
            self.save_users([change(user) if user.id == user_id else user for user in users])

    def deactivate_user(self, user_id: str) -> None:
        self._update_user(user_id, User.deactivated)

    def reactivate_user(self, user_id: str) -> None:
        self._update_user(user_id, User.reactivated)

    def reset_user_password(self, user_id: str) -> None:
        self._update_user(user_id, lambda user: user.password_reset(config.DEFAULT_PASSWORD_HASH))

    def reset_student_password(self, user_id: str) -> None:
        self.reset_user_password(user_id)

    def complete_first_login(self, user_id: str, password_hash: str) -> None:
        self._update_user(user_id, lambda user: user.first_login_completed(password_hash))

    def clear_class_references(self, class_id: str) -> list[User]:
        """Return the roster with ``class_id`` cleared wherever it appears."""
        return [
            user.without_class() if user.class_id == class_id else user
            for user in self.list_users()
        ]

    def _new_student(self, name: str | None, student_id: str | None, class_id: str | None) -> User:
        return User(
            id=self.id_factory(),
            role=UserRole.STUDENT,
            name=name or '',
            student_id=student_id or '',
            login_id='',
            password_hash=config.DEFAULT_PASSWORD_HASH,
            is_first_login=True,
            is_active=True,
            class_id=class_id,
        )

    def upsert_student(self, data: StudentData) -> User | None:
        """Insert a new student, or merge fields onto an existing one.

        Raises DuplicateStudentIdError on insert when an active student of the
        same class already has ``data.student_id``. The update path does not
        re-check that rule, so reassigning a student to another class can
        leave two active students sharing an id until one is edited.
        """
        with self.store.lock:
            users = self.list_users()

            if data.id:
                changes = data.model_dump(exclude_unset=True)
                updated = None
                merged = []
                for user in users:
                    if user.id == data.id:
                        user = updated = user.model_copy(update=changes)
                    merged.append(user)
                self.save_users(merged)
                return updated

            if has_active_student(users, data.class_id, data.student_id):
                raise DuplicateStudentIdError(data.student_id)

            student = self._new_student(data.name, data.student_id, data.class_id)
            self.save_users([*users, student])
            return student

    def bulk_upsert_students(self, students: Iterable[StudentImport]) -> BulkImportResult:
        """Admit every row that does not collide with the existing roster.

        Rows are checked against the roster as it was before the import, not
        against each other.
        """
        with self.store.lock:
            current = self.list_users()
            duplicates: list[str] = []
            admitted: list[User] = []

            for row in students:
                if has_active_student(current, row.class_id, row.student_id):
                    duplicates.append(row.student_id)
                    continue
                admitted.append(self._new_student(row.name, row.student_id, row.class_id))

            self.save_users([*current, *admitted])

        if duplicates:
            logger.warning('Skipped %d duplicate student ids during import', len(duplicates))
        return BulkImportResult(count=len(admitted), duplicates=duplicates)
