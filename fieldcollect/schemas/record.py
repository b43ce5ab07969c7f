"""
Record schemas
"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from fieldcollect.models.record import PersonType
from fieldcollect.schemas.common import CamelModel


class RecordBase(CamelModel):
    record_title: Optional[str] = Field(None, description="Short title shown in lists")
    person_type: PersonType = Field(..., description="Landlord or Tenant")
    landlord_name: Optional[str] = None
    landlord_phone: Optional[str] = None
    tenant_name: Optional[str] = None
    tenant_phone: Optional[str] = None
    national_id: Optional[str] = None
    house_number: Optional[str] = None
    street: Optional[str] = None
    area: Optional[str] = None
    town: Optional[str] = None
    notes: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    gps_timestamp: Optional[datetime] = Field(None, description="When the GPS fix was captured")
    custom_fields: Dict[str, Any] = Field(default_factory=dict, description="Values keyed by custom column name")
    is_synced: bool = Field(default=True, description="Set by the offline client; informational only")


class RecordCreate(RecordBase):
    """
    Schema for creating a record.

    ``collected_by`` is honoured for admins and secondary admins only;
    ``created_at`` lets offline clients keep the original capture time.
    """
    collected_by: Optional[int] = Field(None, description="Crediting user id (admin side only)")
    created_at: Optional[datetime] = Field(None, description="Capture time; defaults to now")


class RecordUpdate(CamelModel):
    """Schema for updating a record. Only provided fields change."""
    collected_by: Optional[int] = None
    record_title: Optional[str] = None
    person_type: Optional[PersonType] = None
    landlord_name: Optional[str] = None
    landlord_phone: Optional[str] = None
    tenant_name: Optional[str] = None
    tenant_phone: Optional[str] = None
    national_id: Optional[str] = None
    house_number: Optional[str] = None
    street: Optional[str] = None
    area: Optional[str] = None
    town: Optional[str] = None
    notes: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    gps_timestamp: Optional[datetime] = None
    custom_fields: Optional[Dict[str, Any]] = None
    is_synced: Optional[bool] = None


class RecordOut(RecordBase):
    """Record output schema. Datetimes in UTC with Z."""
    id: int
    collected_by: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer("gps_timestamp", "created_at", "updated_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from fieldcollect.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)


class RecordFilters(BaseModel):
    """
    Optional record predicates, combined with AND.

    ``search`` matches the landlord name only.
    """
    agent_id: Optional[int] = None
    search: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    town: Optional[str] = None
    area: Optional[str] = None

    model_config = ConfigDict(frozen=True)
