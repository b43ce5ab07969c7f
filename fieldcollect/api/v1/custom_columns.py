"""
Custom column endpoints
"""
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from fieldcollect.core.authorization import Action
from fieldcollect.core.deps import get_db, require_action
from fieldcollect.models.user import User
from fieldcollect.schemas.custom_column import CustomColumnCreate, CustomColumnOut, CustomColumnUpdate
from fieldcollect.services.custom_column_service import (
    create_column,
    delete_column,
    list_columns,
    update_column,
)

router = APIRouter()


@router.get("", response_model=List[CustomColumnOut])
async def list_columns_endpoint(
    active_only: bool = Query(False, alias="activeOnly", description="Only columns shown on new-record forms"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.LIST_CUSTOM_COLUMNS)),
):
    """List custom columns (any authenticated user)"""
    return list_columns(db, active_only=active_only)


@router.post("", response_model=CustomColumnOut, status_code=201)
async def create_column_endpoint(
    column_data: CustomColumnCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.CREATE_CUSTOM_COLUMN)),
):
    """Create a custom column (manageCustomColumns)"""
    return create_column(db, column_data, current_user.id)


@router.put("/{column_id}", response_model=CustomColumnOut)
async def update_column_endpoint(
    column_id: int,
    column_data: CustomColumnUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.UPDATE_CUSTOM_COLUMN)),
):
    """Update a custom column (manageCustomColumns)"""
    return update_column(db, column_id, column_data, current_user.id)


@router.delete("/{column_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_column_endpoint(
    column_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.DELETE_CUSTOM_COLUMN)),
):
    """Delete a custom column (manageCustomColumns). Stored record values are kept."""
    delete_column(db, column_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
