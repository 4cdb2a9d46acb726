"""Bootstrap data for an empty installation.

``BootstrapSeeder.init`` runs at process start. When the roster holds no
administrator it writes the fixed admin account, and unless
``SEED_SAMPLE_DATA`` is off, a sample teacher, class and student. An existing
administrator, active or not, leaves everything untouched.
"""

import logging

from reflectnote.core import config
from reflectnote.models.class_info import ClassInfo
from reflectnote.models.user import User, UserRole
from reflectnote.repositories.classes import ClassRepository
from reflectnote.repositories.users import UserRepository, has_active_student, has_admin

logger = logging.getLogger(__name__)

ADMIN_ID = 'super-admin-1'
SAMPLE_TEACHER_ID = 'teacher-sample-1'
SAMPLE_CLASS_ID = 'class-1'
SAMPLE_STUDENT_ID = 'student-sample-1'
SAMPLE_TARGET_DAYS = 190


class BootstrapSeeder:

    def __init__(self, users: UserRepository, classes: ClassRepository, seed_sample_data: bool | None = None) -> None:
        self.users = users
        self.classes = classes
        self.seed_sample_data = config.SEED_SAMPLE_DATA if seed_sample_data is None else seed_sample_data

    def _seed_records(self) -> tuple[User, list[User], list[ClassInfo]]:
        admin = User(
            id=ADMIN_ID,
            role=UserRole.ADMIN,
            name='System Administrator',
            login_id='admin',
            password_hash=config.DEFAULT_PASSWORD_HASH,
            is_first_login=True,
            is_active=True,
        )
        if not self.seed_sample_data:
            return admin, [], []

        teacher = User(
            id=SAMPLE_TEACHER_ID,
            role=UserRole.TEACHER,
            name='Sample Teacher',
            login_id='teacher1',
            password_hash=config.DEFAULT_PASSWORD_HASH,
            is_first_login=False,
            is_active=True,
        )
        class_info = ClassInfo(
            id=SAMPLE_CLASS_ID,
            name='Grade 1 Class 3',
            year=str(self.users.clock().year),
            teacher_id=teacher.id,
            target_days=SAMPLE_TARGET_DAYS,
        )
        student = User(
            id=SAMPLE_STUDENT_ID,
            role=UserRole.STUDENT,
            name='Sample Student',
            student_id='10301',
            login_id='',
            password_hash=config.DEFAULT_PASSWORD_HASH,
            is_first_login=True,
            is_active=True,
            class_id=class_info.id,
        )
        return admin, [teacher, student], [class_info]

    def init(self) -> bool:
        """Seed when no administrator exists. Returns True if anything was written."""
        store = self.users.store
        with store.lock:
            users = self.users.list_users()
            if has_admin(users):
                return False

            admin, samples, sample_classes = self._seed_records()
            # Sample records already present under their fixed ids are not
            # repeated, nor is a sample student whose class seat is taken.
            user_ids = {user.id for user in users}
            new_users = [
                user for user in samples
                if user.id not in user_ids
                and not (user.role == UserRole.STUDENT and has_active_student(users, user.class_id, user.student_id))
            ]

            classes = self.classes.list_classes()
            class_ids = {class_info.id for class_info in classes}
            new_classes = [class_info for class_info in sample_classes if class_info.id not in class_ids]

            store.set_many({
                config.USERS_KEY: self.users.dump_users([*users, admin, *new_users]),
                config.CLASSES_KEY: self.classes.dump_classes([*classes, *new_classes]),
            })

        logger.info('Seeded administrator account %s with %d sample records', ADMIN_ID, len(new_users) + len(new_classes))
        return True
