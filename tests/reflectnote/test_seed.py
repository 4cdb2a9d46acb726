import os
from datetime import datetime, timezone

import pytest

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from reflectnote.models.class_info import ClassInfo  # noqa: E402
from reflectnote.models.user import User, UserRole  # noqa: E402
from reflectnote.repositories.classes import ClassRepository  # noqa: E402
from reflectnote.repositories.users import UserRepository  # noqa: E402
from reflectnote.seed import ADMIN_ID, BootstrapSeeder  # noqa: E402
from reflectnote.storage import MemoryRecordStore  # noqa: E402


def _clock() -> datetime:
    return datetime(2026, 3, 2, tzinfo=timezone.utc)


@pytest.fixture
def store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def users(store: MemoryRecordStore) -> UserRepository:
    return UserRepository(store, clock=_clock)


@pytest.fixture
def classes(store: MemoryRecordStore, users: UserRepository) -> ClassRepository:
    return ClassRepository(store, users)


def test_init_seeds_admin_and_sample_data(users: UserRepository, classes: ClassRepository) -> None:
    assert BootstrapSeeder(users, classes, seed_sample_data=True).init() is True

    roster = {user.id: user for user in users.list_users()}
    assert list(roster) == ['super-admin-1', 'teacher-sample-1', 'student-sample-1']

    admin = roster['super-admin-1']
    assert admin.role == UserRole.ADMIN
    assert admin.login_id == 'admin'
    assert admin.is_first_login is True

    assert roster['teacher-sample-1'].is_first_login is False
    assert roster['student-sample-1'].class_id == 'class-1'
    assert roster['student-sample-1'].student_id == '10301'

    assert classes.list_classes() == [
        ClassInfo(id='class-1', name='Grade 1 Class 3', year='2026', teacher_id='teacher-sample-1', target_days=190),
    ]


@pytest.mark.parametrize('runs', [1, 2, 5])
def test_init_is_idempotent(users: UserRepository, classes: ClassRepository, runs: int) -> None:
    seeder = BootstrapSeeder(users, classes, seed_sample_data=True)

    results = [seeder.init() for _ in range(runs)]

    assert results == [True] + [False] * (runs - 1)
    admins = [user for user in users.list_users() if user.role == UserRole.ADMIN]
    assert [admin.id for admin in admins] == [ADMIN_ID]
    assert len(users.list_users()) == 3
    assert len(classes.list_classes()) == 1


def test_init_leaves_roster_untouched_when_admin_exists(
    users: UserRepository,
    classes: ClassRepository,
    store: MemoryRecordStore,
) -> None:
    users.save_users([User(id='admin-x', role=UserRole.ADMIN, login_id='root', password_hash='h', is_active=False)])

    assert BootstrapSeeder(users, classes).init() is False
    assert [user.id for user in users.list_users()] == ['admin-x']
    assert classes.list_classes() == []


def test_init_keeps_existing_records_and_skips_repeated_samples(
    users: UserRepository,
    classes: ClassRepository,
) -> None:
    existing_teacher = User(id='teacher-sample-1', role=UserRole.TEACHER, name='Kept', password_hash='h')
    users.save_users([existing_teacher])
    classes.save_classes([ClassInfo(id='class-9', name='9-1', year='2025', teacher_id='t9', target_days=100)])

    BootstrapSeeder(users, classes, seed_sample_data=True).init()

    roster = users.list_users()
    assert [user.id for user in roster] == ['teacher-sample-1', 'super-admin-1', 'student-sample-1']
    assert roster[0].name == 'Kept'
    assert [class_info.id for class_info in classes.list_classes()] == ['class-9', 'class-1']


def test_init_without_sample_data_seeds_only_admin(users: UserRepository, classes: ClassRepository) -> None:
    BootstrapSeeder(users, classes, seed_sample_data=False).init()

    assert [user.id for user in users.list_users()] == [ADMIN_ID]
    assert classes.list_classes() == []


def test_init_writes_users_and_classes_in_one_batch(users: UserRepository, classes: ClassRepository, monkeypatch) -> None:
    batches = []
    original_set_many = users.store.set_many

    def recording_set_many(values):
        batches.append(sorted(values))
        original_set_many(values)

    monkeypatch.setattr(users.store, 'set_many', recording_set_many)

    BootstrapSeeder(users, classes, seed_sample_data=True).init()

    assert batches == [['reflection_note_classes_v2', 'reflection_note_users_v2']]


def test_init_skips_sample_student_when_class_seat_is_taken(users: UserRepository, classes: ClassRepository) -> None:
    users.save_users([
        User(id='real-1', role=UserRole.STUDENT, name='Real', student_id='10301', class_id='class-1', password_hash='h'),
    ])

    BootstrapSeeder(users, classes, seed_sample_data=True).init()

    roster = users.list_users()
    assert [user.id for user in roster] == ['real-1', 'super-admin-1', 'teacher-sample-1']
    pairs = [(user.class_id, user.student_id) for user in roster if user.is_active_student()]
    assert pairs == [('class-1', '10301')]


def test_init_adds_sample_student_when_only_inactive_student_holds_the_seat(
    users: UserRepository,
    classes: ClassRepository,
) -> None:
    users.save_users([
        User(
            id='old-1',
            role=UserRole.STUDENT,
            student_id='10301',
            class_id='class-1',
            password_hash='h',
            is_active=False,
        ),
    ])

    BootstrapSeeder(users, classes, seed_sample_data=True).init()

    assert 'student-sample-1' in [user.id for user in users.list_users()]
