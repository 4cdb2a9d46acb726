import os

import pytest
from sqlalchemy.exc import OperationalError

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from reflectnote import main  # noqa: E402
from reflectnote.models.user import UserRole  # noqa: E402
from reflectnote.repositories.users import UserRepository  # noqa: E402
from reflectnote.storage import MemoryRecordStore  # noqa: E402


def test_root_reports_status() -> None:
    assert main.root() == {'status': 'Reflection Note API Running'}


def test_startup_seeds_administrator(monkeypatch: pytest.MonkeyPatch) -> None:
    store = MemoryRecordStore()
    monkeypatch.setattr(main, 'ensure_record_schema', lambda: None)
    monkeypatch.setattr(main, 'get_store', lambda: store)

    main.initialize_storage()
    main.initialize_storage()

    admins = [user for user in UserRepository(store).list_users() if user.role == UserRole.ADMIN]
    assert [admin.id for admin in admins] == ['super-admin-1']


def test_startup_logs_storage_failure(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    def failing_schema():
        raise OperationalError('PRAGMA', {}, Exception('down'))

    monkeypatch.setattr(main, 'ensure_record_schema', failing_schema)

    main.initialize_storage()

    assert 'Storage initialization failed' in caplog.text
