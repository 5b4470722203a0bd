"""
Declarative base and shared columns for the costing models.

Every table gets an integer primary key, a UUID for stable external
references and created/updated timestamps.
"""

import uuid as uuid_lib
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import declarative_base

from recipe_costing.utils.datetime_utils import utc_now

Base = declarative_base()


def _new_uuid() -> str:
    return str(uuid_lib.uuid4())


class BaseModel(Base):
    """Abstract model carrying id, uuid and timestamp columns."""

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Text column; SQLite has no native UUID type
    uuid = Column(String(36), unique=True, nullable=False, default=_new_uuid, index=True)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """
        Column values keyed by column name.

        Datetimes are rendered as ISO 8601 strings so the result can be
        printed or serialized directly.
        """
        data = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            data[column.name] = value.isoformat() if isinstance(value, datetime) else value
        return data

    def __repr__(self) -> str:
        name = getattr(self, "name", None)
        label = f", name='{name}'" if name is not None else ""
        return f"{self.__class__.__name__}(id={self.id}{label})"
