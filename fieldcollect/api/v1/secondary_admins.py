"""
Secondary admin management endpoints (system admin only)
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fieldcollect.core.authorization import Action
from fieldcollect.core.deps import get_db, require_action
from fieldcollect.models.user import User
from fieldcollect.schemas.user import SecondaryAdminCreate, SecondaryAdminUpdate, UserOut
from fieldcollect.services.user_service import (
    create_secondary_admin,
    list_secondary_admins,
    to_user_out,
    update_secondary_admin,
)

router = APIRouter()


@router.get("", response_model=List[UserOut])
async def list_secondary_admins_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.LIST_SECONDARY_ADMINS)),
):
    """List secondary admins"""
    return [to_user_out(admin) for admin in list_secondary_admins(db)]


@router.post("", response_model=UserOut, status_code=201)
async def create_secondary_admin_endpoint(
    admin_data: SecondaryAdminCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.CREATE_SECONDARY_ADMIN)),
):
    """Create a secondary admin with its permission map"""
    return to_user_out(create_secondary_admin(db, admin_data, current_user.id))


@router.put("/{admin_id}", response_model=UserOut)
async def update_secondary_admin_endpoint(
    admin_id: int,
    admin_data: SecondaryAdminUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.UPDATE_SECONDARY_ADMIN)),
):
    """Update a secondary admin, including permission toggles"""
    return to_user_out(update_secondary_admin(db, admin_id, admin_data, current_user.id))
