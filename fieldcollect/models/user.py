"""
User model (admins, secondary admins and field agents)
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON

from fieldcollect.core.permissions import Role
from fieldcollect.db.base import Base
from fieldcollect.utils.datetime_utils import now_utc

__all__ = ["User", "Role"]


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    full_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    role = Column(String, nullable=False, default=Role.AGENT.value, index=True)
    # Only meaningful for secondary_admin; keys are Permission values
    permissions = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
