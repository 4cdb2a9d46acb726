from threading import Lock

from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import declarative_base, sessionmaker

from reflectnote.core import config


engine = create_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_record_schema_checked = False


def ensure_record_schema(bind=None) -> None:
    global _record_schema_checked

    if _record_schema_checked and bind is None:
        return

    with _schema_lock:
        if _record_schema_checked and bind is None:
            return

        # Imported here so the model registers on Base before create_all.
        from reflectnote.models.record import Record

        target = bind or engine
        inspector = inspect(target)

        if Record.__tablename__ not in inspector.get_table_names():
            Base.metadata.create_all(bind=target, tables=[Record.__table__])

        if bind is None:
            _record_schema_checked = True
