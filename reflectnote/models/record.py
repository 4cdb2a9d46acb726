"""Key-value record model definitions."""

from sqlalchemy import Column, String, Text
from reflectnote.database import Base


class Record(Base):
    """One serialized collection stored under a fixed key."""
    __tablename__ = "records"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
