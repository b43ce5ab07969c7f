"""
Field record model
"""
import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, ForeignKey, JSON, Text

from fieldcollect.db.base import Base
from fieldcollect.utils.datetime_utils import now_utc


class PersonType(str, enum.Enum):
    LANDLORD = "Landlord"
    TENANT = "Tenant"


class Record(Base):
    __tablename__ = "records"

    id = Column(Integer, primary_key=True, index=True)
    collected_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    record_title = Column(String, nullable=True)
    person_type = Column(String, nullable=False, default=PersonType.LANDLORD.value)

    landlord_name = Column(String, nullable=True, index=True)
    landlord_phone = Column(String, nullable=True)
    tenant_name = Column(String, nullable=True)
    tenant_phone = Column(String, nullable=True)
    national_id = Column(String, nullable=True)
    house_number = Column(String, nullable=True)
    street = Column(String, nullable=True)
    area = Column(String, nullable=True)
    town = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    gps_timestamp = Column(DateTime(timezone=True), nullable=True)

    # Keyed by custom column name; may hold names of deleted/inactive columns
    custom_fields = Column(JSON, nullable=False, default=dict)
    is_synced = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)
