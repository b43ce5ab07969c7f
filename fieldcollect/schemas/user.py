"""
User schemas for agents and secondary admins
"""
from datetime import datetime
from typing import Dict, Optional

from pydantic import Field, field_serializer, field_validator

from fieldcollect.core.permissions import Permission, Role
from fieldcollect.schemas.common import CamelModel


def _check_password(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    if len(v) < 6:
        raise ValueError("Password must be at least 6 characters")
    if len(v.encode("utf-8")) > 128:
        raise ValueError("Password cannot be longer than 128 bytes")
    return v


class AgentCreate(CamelModel):
    """Schema for creating a field agent. Role is always agent."""
    username: str = Field(..., min_length=3, max_length=64, description="Login name (unique)")
    password: str = Field(..., description="Initial password")
    full_name: str = Field(..., min_length=1, description="Display name")
    phone: Optional[str] = Field(None, description="Contact phone")
    is_active: bool = Field(default=True, description="Whether the account may log in")

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)


class AgentUpdate(CamelModel):
    """Schema for updating a field agent"""
    username: Optional[str] = Field(None, min_length=3, max_length=64)
    password: Optional[str] = Field(None, description="New password")
    full_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)


class SecondaryAdminCreate(AgentCreate):
    """Schema for creating a secondary admin. Role is always secondary_admin."""
    permissions: Dict[Permission, bool] = Field(
        default_factory=dict,
        description="Granted permissions; missing keys are denied"
    )


class SecondaryAdminUpdate(AgentUpdate):
    """Schema for updating a secondary admin, including permission toggles"""
    permissions: Optional[Dict[Permission, bool]] = Field(
        None,
        description="Replacement permission map; missing keys are denied"
    )


class UserOut(CamelModel):
    """User output schema. Never exposes the password hash."""
    id: int
    username: str
    full_name: str
    phone: Optional[str] = None
    role: Role
    permissions: Optional[Dict[str, bool]] = None
    is_active: bool
    created_at: Optional[datetime] = None

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        from fieldcollect.utils.datetime_utils import iso_8601_utc
        return iso_8601_utc(dt)
