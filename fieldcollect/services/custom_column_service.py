"""
Custom column service - registry of admin-defined record fields
"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from fieldcollect.core.errors import NotFound, ValidationFailed
from fieldcollect.models.custom_column import CustomColumn, FieldType
from fieldcollect.schemas.custom_column import CustomColumnCreate, CustomColumnUpdate
from fieldcollect.services.audit_service import log_audit

logger = logging.getLogger(__name__)


def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(CustomColumn).filter(func.lower(CustomColumn.name) == func.lower(name))
    if exclude_id is not None:
        query = query.filter(CustomColumn.id != exclude_id)
    if query.first():
        raise ValidationFailed("name", f"Custom column with name '{name}' already exists")


def list_columns(db: Session, active_only: bool = False) -> List[CustomColumn]:
    """
    List custom columns in creation order

    Args:
        db: Database session
        active_only: If True, only columns offered on new-record forms
    """
    query = db.query(CustomColumn)
    if active_only:
        query = query.filter(CustomColumn.is_active.is_(True))
    return query.order_by(CustomColumn.created_at.asc(), CustomColumn.id.asc()).all()


def list_active(db: Session) -> List[CustomColumn]:
    """Columns records are validated against"""
    return list_columns(db, active_only=True)


def get_column(db: Session, column_id: int) -> Optional[CustomColumn]:
    """Get a custom column by ID"""
    return db.query(CustomColumn).filter(CustomColumn.id == column_id).first()


def create_column(db: Session, column_data: CustomColumnCreate, actor_id: int) -> CustomColumn:
    """
    Create a custom column

    Raises:
        ValidationFailed: If the name is already taken (case-insensitive)
    """
    _ensure_unique_name(db, column_data.name)

    column = CustomColumn(
        name=column_data.name,
        field_type=column_data.field_type.value,
        is_required=column_data.is_required,
        options=column_data.options if column_data.field_type == FieldType.SELECT else None,
        is_active=column_data.is_active,
    )
    db.add(column)
    db.commit()
    db.refresh(column)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="CREATE",
        entity_type="custom_column",
        entity_id=column.id,
        meta={"name": column.name, "field_type": column.field_type},
    )
    logger.info("Custom column %s (%s) created by user %s", column.name, column.field_type, actor_id)
    return column


def update_column(
    db: Session,
    column_id: int,
    column_data: CustomColumnUpdate,
    actor_id: int,
) -> CustomColumn:
    """
    Update a custom column

    The field type / options pairing is checked on the merged state:
    select needs a non-empty option list, other types carry none.

    Raises:
        NotFound: If the column does not exist
        ValidationFailed: On a duplicate name or invalid options
    """
    column = get_column(db, column_id)
    if not column:
        raise NotFound("Custom column", column_id)

    update_dict = column_data.model_dump(exclude_unset=True)

    if update_dict.get("name") is not None:
        _ensure_unique_name(db, update_dict["name"], exclude_id=column_id)
        column.name = update_dict["name"]

    field_type = FieldType(update_dict.get("field_type") or column.field_type)
    options = update_dict["options"] if "options" in update_dict else column.options

    if field_type == FieldType.SELECT:
        if not options:
            raise ValidationFailed("options", "Select columns require at least one option")
    else:
        if "options" in update_dict and options:
            raise ValidationFailed("options", "Options are only allowed for select columns")
        options = None

    column.field_type = field_type.value
    column.options = options

    if update_dict.get("is_required") is not None:
        column.is_required = update_dict["is_required"]
    if update_dict.get("is_active") is not None:
        column.is_active = update_dict["is_active"]

    db.commit()
    db.refresh(column)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="UPDATE",
        entity_type="custom_column",
        entity_id=column.id,
        meta={"name": column.name, "updated_fields": update_dict},
    )
    return column


def delete_column(db: Session, column_id: int, actor_id: int) -> None:
    """
    Delete a custom column

    Values already stored under its name in records are left in place.

    Raises:
        NotFound: If the column does not exist
    """
    column = get_column(db, column_id)
    if not column:
        raise NotFound("Custom column", column_id)

    name = column.name
    db.delete(column)
    db.commit()

    log_audit(
        db=db,
        actor_id=actor_id,
        action="DELETE",
        entity_type="custom_column",
        entity_id=column_id,
        meta={"name": name},
    )
    logger.info("Custom column %s deleted by user %s", name, actor_id)
