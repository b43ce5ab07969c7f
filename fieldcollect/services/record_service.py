"""
Record service - field record reads, writes and export rows

Callers authorize the action before calling in; this module enforces the
per-record rules (owner attribution, custom field validation, existence).
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from fieldcollect.core.authorization import may_reassign_owner, resolve_collected_by
from fieldcollect.core.config import settings
from fieldcollect.core.errors import NotFound, ValidationFailed
from fieldcollect.models.record import Record
from fieldcollect.models.user import User
from fieldcollect.schemas.record import RecordCreate, RecordFilters, RecordUpdate
from fieldcollect.services.audit_service import log_audit
from fieldcollect.services.custom_column_service import list_active, list_columns
from fieldcollect.services.custom_field_validator import validate_custom_fields
from fieldcollect.services.record_filter import filter_records
from fieldcollect.services.stats_service import display_name
from fieldcollect.utils.datetime_utils import ensure_utc, iso_8601_utc, now_utc
from fieldcollect.utils.json_serializer import sanitize_for_json

logger = logging.getLogger(__name__)

EXPORT_HEADERS = [
    "id",
    "recordTitle",
    "personType",
    "landlordName",
    "landlordPhone",
    "tenantName",
    "tenantPhone",
    "nationalId",
    "houseNumber",
    "street",
    "area",
    "town",
    "latitude",
    "longitude",
    "gpsTimestamp",
    "collectedBy",
    "collectedByName",
    "notes",
    "createdAt",
    "updatedAt",
]

_NOT_NULLABLE = {"is_synced"}

CUSTOM_HEADER_PREFIX = "custom:"


def _check_custom_fields(db: Session, fields: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    result = validate_custom_fields(fields, list_active(db))
    if result.unknown_fields:
        logger.debug("Keeping custom fields with no active column: %s", result.unknown_fields)
    if not result.is_valid:
        errors = result.error_dicts()
        if settings.REJECT_INVALID_CUSTOM_FIELDS:
            first = errors[0]
            raise ValidationFailed(first["field"], f"{first['field']} {result.errors[0].message}", errors)
        logger.warning("Storing record with invalid custom fields: %s", errors)
    return sanitize_for_json(fields or {})


def _ensure_collector_exists(db: Session, user_id: int) -> None:
    if not db.query(User.id).filter(User.id == user_id).first():
        raise ValidationFailed("collectedBy", f"User with id {user_id} does not exist")


def list_records(db: Session, filters: Optional[RecordFilters] = None) -> List[Record]:
    """
    List records matching the filters, newest first

    Args:
        db: Database session
        filters: optional predicates (owner, landlord search, date range, town, area)
    """
    snapshot = db.query(Record).order_by(Record.id.asc()).all()
    return filter_records(snapshot, filters)


def get_record(db: Session, record_id: int) -> Record:
    """
    Get a record by ID

    Raises:
        NotFound: If the record does not exist
    """
    record = db.query(Record).filter(Record.id == record_id).first()
    if not record:
        raise NotFound("Record", record_id)
    return record


def create_record(db: Session, actor: User, record_data: RecordCreate) -> Record:
    """
    Create a record credited to the actor, or to the requested collector
    when an admin-side actor asks for it.

    Raises:
        ValidationFailed: On an unknown collector or invalid custom fields
    """
    collected_by = resolve_collected_by(actor, record_data.collected_by)
    if collected_by != actor.id:
        _ensure_collector_exists(db, collected_by)

    custom_fields = _check_custom_fields(db, record_data.custom_fields)

    values = record_data.model_dump(exclude={"collected_by", "created_at", "custom_fields", "person_type"})
    created_at = ensure_utc(record_data.created_at) or now_utc()
    record = Record(
        **values,
        person_type=record_data.person_type.value,
        collected_by=collected_by,
        custom_fields=custom_fields,
        created_at=created_at,
        updated_at=now_utc(),
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    log_audit(
        db=db,
        actor_id=actor.id,
        action="CREATE",
        entity_type="record",
        entity_id=record.id,
        meta={"collected_by": collected_by, "is_synced": record.is_synced},
    )
    return record


def update_record(db: Session, actor: User, record_id: int, record_data: RecordUpdate) -> Record:
    """
    Update a record; last writer wins

    collectedBy changes from actors without reassignment rights are ignored.

    Raises:
        NotFound: If the record does not exist
        ValidationFailed: On an unknown collector or invalid custom fields
    """
    record = get_record(db, record_id)
    update_dict = record_data.model_dump(exclude_unset=True)

    new_owner = update_dict.pop("collected_by", None)
    if new_owner is not None and new_owner != record.collected_by:
        if may_reassign_owner(actor):
            _ensure_collector_exists(db, new_owner)
            record.collected_by = new_owner
        else:
            logger.info(
                "Ignoring collectedBy change on record %s from user %s", record_id, actor.id
            )

    # null leaves the stored map unchanged
    custom_fields = update_dict.pop("custom_fields", None)
    if custom_fields is not None:
        record.custom_fields = _check_custom_fields(db, custom_fields)

    person_type = update_dict.pop("person_type", None)
    if person_type is not None:
        record.person_type = person_type.value

    for key, value in update_dict.items():
        if value is None and key in _NOT_NULLABLE:
            continue
        setattr(record, key, value)
    record.updated_at = now_utc()

    db.commit()
    db.refresh(record)

    log_audit(
        db=db,
        actor_id=actor.id,
        action="UPDATE",
        entity_type="record",
        entity_id=record.id,
        meta={"updated_fields": record_data.model_dump(exclude_unset=True)},
    )
    return record


def delete_record(db: Session, actor: User, record_id: int) -> None:
    """
    Delete a record

    Raises:
        NotFound: If the record does not exist
    """
    record = get_record(db, record_id)
    collected_by = record.collected_by
    db.delete(record)
    db.commit()

    log_audit(
        db=db,
        actor_id=actor.id,
        action="DELETE",
        entity_type="record",
        entity_id=record_id,
        meta={"collected_by": collected_by},
    )


def _custom_header(name: str) -> str:
    """Export header for a custom column; names that clash with a record column are prefixed"""
    if name in EXPORT_HEADERS or name.startswith(CUSTOM_HEADER_PREFIX):
        return f"{CUSTOM_HEADER_PREFIX}{name}"
    return name


def get_export_rows(db: Session, filters: Optional[RecordFilters] = None) -> Tuple[List[str], List[Dict]]:
    """
    Rows for the spreadsheet export

    Fixed record columns come first, then one column per custom column
    (active or not) in creation order. A custom column whose name clashes
    with a record column is exported as "custom:<name>".

    Returns:
        (headers, rows)
    """
    records = list_records(db, filters)
    custom_names = [c.name for c in list_columns(db)]
    custom_headers = {name: _custom_header(name) for name in custom_names}
    names = {u.id: u.full_name for u in db.query(User).all()}

    rows: List[Dict] = []
    for r in records:
        custom_fields = r.custom_fields or {}
        row = {
            "id": r.id,
            "recordTitle": r.record_title or "",
            "personType": r.person_type,
            "landlordName": r.landlord_name or "",
            "landlordPhone": r.landlord_phone or "",
            "tenantName": r.tenant_name or "",
            "tenantPhone": r.tenant_phone or "",
            "nationalId": r.national_id or "",
            "houseNumber": r.house_number or "",
            "street": r.street or "",
            "area": r.area or "",
            "town": r.town or "",
            "latitude": "" if r.latitude is None else r.latitude,
            "longitude": "" if r.longitude is None else r.longitude,
            "gpsTimestamp": iso_8601_utc(r.gps_timestamp) or "",
            "collectedBy": r.collected_by,
            "collectedByName": display_name(r.collected_by, names),
            "notes": r.notes or "",
            "createdAt": iso_8601_utc(r.created_at) or "",
            "updatedAt": iso_8601_utc(r.updated_at) or "",
        }
        for name, header in custom_headers.items():
            value = custom_fields.get(name)
            row[header] = "" if value is None else value
        rows.append(row)

    headers = EXPORT_HEADERS + list(custom_headers.values())
    return headers, rows
