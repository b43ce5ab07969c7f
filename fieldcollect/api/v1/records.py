"""
Field record endpoints
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from fieldcollect.core.authorization import Action
from fieldcollect.core.deps import get_db, require_action
from fieldcollect.models.user import User
from fieldcollect.schemas.record import RecordCreate, RecordFilters, RecordOut, RecordUpdate
from fieldcollect.services.audit_service import log_audit
from fieldcollect.services.record_service import (
    create_record,
    delete_record,
    get_export_rows,
    get_record,
    list_records,
    update_record,
)
from fieldcollect.utils.csv_export import stream_csv
from fieldcollect.utils.datetime_utils import now_utc

router = APIRouter()


def record_filters(
    agent_id: Optional[int] = Query(None, alias="agentId", description="Collector user ID"),
    search: Optional[str] = Query(None, description="Landlord name contains (case-insensitive)"),
    start_date: Optional[datetime] = Query(None, alias="startDate", description="Created at or after"),
    end_date: Optional[datetime] = Query(None, alias="endDate", description="Created at or before"),
    town: Optional[str] = Query(None, description="Town contains (case-insensitive)"),
    area: Optional[str] = Query(None, description="Area contains (case-insensitive)"),
) -> RecordFilters:
    return RecordFilters(
        agent_id=agent_id,
        search=search,
        start_date=start_date,
        end_date=end_date,
        town=town,
        area=area,
    )


@router.get("", response_model=List[RecordOut])
async def list_records_endpoint(
    filters: RecordFilters = Depends(record_filters),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.LIST_RECORDS)),
):
    """
    List records, newest first

    Admins and agents always; secondary admins need viewRecords.
    """
    return list_records(db, filters)


@router.get("/export.csv")
async def export_records_csv(
    filters: RecordFilters = Depends(record_filters),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.EXPORT_RECORDS)),
):
    """
    Export filtered records as CSV (exportRecords permission)
    """
    headers, rows = get_export_rows(db, filters)

    log_audit(
        db=db,
        actor_id=current_user.id,
        action="EXPORT",
        entity_type="record",
        meta={"filters": filters.model_dump(exclude_none=True), "row_count": len(rows)},
    )

    filename = f"records_{now_utc().strftime('%Y%m%d_%H%M%S')}.csv"
    return stream_csv(headers, rows, filename=filename)


@router.get("/{record_id}", response_model=RecordOut)
async def get_record_endpoint(
    record_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.LIST_RECORDS)),
):
    """Get a single record"""
    return get_record(db, record_id)


@router.post("", response_model=RecordOut, status_code=201)
async def create_record_endpoint(
    record_data: RecordCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.CREATE_RECORD)),
):
    """
    Create a record

    Agents are always credited as collector; admins and secondary admins
    (addRecords) may credit another user via collectedBy.
    """
    return create_record(db, current_user, record_data)


@router.put("/{record_id}", response_model=RecordOut)
async def update_record_endpoint(
    record_id: int,
    record_data: RecordUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.UPDATE_RECORD)),
):
    """Update a record (agents, or editRecords)"""
    return update_record(db, current_user, record_id, record_data)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record_endpoint(
    record_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.DELETE_RECORD)),
):
    """Delete a record (deleteRecords)"""
    delete_record(db, current_user, record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
