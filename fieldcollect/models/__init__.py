"""
Database models
"""
from fieldcollect.models.user import User, Role
from fieldcollect.models.record import Record, PersonType
from fieldcollect.models.custom_column import CustomColumn, FieldType
from fieldcollect.models.audit_log import AuditLog

__all__ = [
    "User",
    "Role",
    "Record",
    "PersonType",
    "CustomColumn",
    "FieldType",
    "AuditLog",
]
