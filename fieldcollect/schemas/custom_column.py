"""
Custom column schemas
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_serializer, field_validator, model_validator

from fieldcollect.models.custom_column import FieldType
from fieldcollect.schemas.common import CamelModel


def _clean_options(v: Optional[List[str]]) -> Optional[List[str]]:
    if v is None:
        return None
    cleaned = []
    for option in v:
        option = str(option).strip()
        if option and option not in cleaned:
            cleaned.append(option)
    return cleaned


class CustomColumnCreate(CamelModel):
    """Schema for creating a custom column"""
    name: str = Field(..., min_length=1, max_length=100, description="Column label (unique)")
    field_type: FieldType = Field(default=FieldType.TEXT)
    is_required: bool = Field(default=False)
    options: Optional[List[str]] = Field(None, description="Allowed values, select columns only")
    is_active: bool = Field(default=True)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("options", mode="before")
    @classmethod
    def clean_options(cls, v):
        return _clean_options(v) if isinstance(v, list) else v

    @model_validator(mode="after")
    def check_options(self):
        if self.field_type == FieldType.SELECT:
            if not self.options:
                raise ValueError("Select columns require at least one option")
        elif self.options:
            raise ValueError("Options are only allowed for select columns")
        return self


class CustomColumnUpdate(CamelModel):
    """
    Schema for updating a custom column.

    The options/field type pairing is checked against the merged column
    state in the service.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    field_type: Optional[FieldType] = None
    is_required: Optional[bool] = None
    options: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("options", mode="before")
    @classmethod
    def clean_options(cls, v):
        return _clean_options(v) if isinstance(v, list) else v


class CustomColumnOut(CamelModel):
    id: int
    name: str
    field_type: FieldType
    is_required: bool
    options: Optional[List[str]] = None
    is_active: bool
    created_at: Optional[datetime] = None

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from fieldcollect.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)
