"""
Authentication endpoints
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fieldcollect.core.deps import get_current_user, get_db
from fieldcollect.core.errors import AuthenticationRequired, PermissionDenied
from fieldcollect.core.security import create_access_token
from fieldcollect.models.user import User
from fieldcollect.schemas.auth import LoginRequest, TokenResponse
from fieldcollect.schemas.user import UserOut
from fieldcollect.services.audit_service import log_audit
from fieldcollect.services.user_service import authenticate, to_user_out

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return JWT token

    Inactive accounts are rejected even with correct credentials.
    """
    user = authenticate(db, login_data.username, login_data.password)
    if not user:
        raise AuthenticationRequired("Invalid username or password")

    if not user.is_active:
        raise PermissionDenied("login", "Account is inactive")

    # JWT 'sub' claim must be a string
    access_token = create_access_token(data={"sub": str(user.id), "role": user.role})

    # Don't fail login if audit fails
    try:
        log_audit(
            db=db,
            actor_id=user.id,
            action="AUTH_LOGIN_SUCCESS",
            entity_type="auth",
            meta={"username": user.username, "role": user.role},
        )
    except Exception as e:
        db.rollback()
        logger.warning("Failed to log audit for login: %s", e)

    return TokenResponse(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=UserOut)
async def read_current_user(current_user: User = Depends(get_current_user)):
    """Profile of the authenticated user, including effective permission flags"""
    return to_user_out(current_user)
