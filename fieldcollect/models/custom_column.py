"""
Custom column model

Admin-defined dynamic fields stored in every record's ``custom_fields``.
"""
import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON

from fieldcollect.db.base import Base
from fieldcollect.utils.datetime_utils import now_utc


class FieldType(str, enum.Enum):
    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"


class CustomColumn(Base):
    __tablename__ = "custom_columns"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    field_type = Column(String, nullable=False, default=FieldType.TEXT.value)
    is_required = Column(Boolean, nullable=False, default=False)
    # Ordered option labels, select columns only
    options = Column(JSON, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
