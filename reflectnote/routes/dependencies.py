from fastapi import Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from reflectnote.database import ensure_record_schema
from reflectnote.repositories.analyses import AnalysisCache
from reflectnote.repositories.classes import ClassRepository
from reflectnote.repositories.reflections import ReflectionRepository
from reflectnote.repositories.users import UserRepository
from reflectnote.storage import RecordStore, SqlRecordStore

STORAGE_UNAVAILABLE_DETAIL = 'Storage unavailable. Verify DATABASE_URL.'

_store: RecordStore | None = None


def storage_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=STORAGE_UNAVAILABLE_DETAIL,
    )


def ensure_storage_ready() -> None:
    try:
        ensure_record_schema()
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc


def get_store() -> RecordStore:
    global _store
    if _store is None:
        _store = SqlRecordStore()
    return _store


def get_user_repository(store: RecordStore = Depends(get_store)) -> UserRepository:
    return UserRepository(store)


def get_class_repository(
    store: RecordStore = Depends(get_store),
    users: UserRepository = Depends(get_user_repository),
) -> ClassRepository:
    return ClassRepository(store, users)


def get_reflection_repository(store: RecordStore = Depends(get_store)) -> ReflectionRepository:
    return ReflectionRepository(store)


def get_analysis_cache(store: RecordStore = Depends(get_store)) -> AnalysisCache:
    return AnalysisCache(store)
