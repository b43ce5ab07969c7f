"""
Dependencies and guards for FastAPI endpoints
"""
import logging
from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from fieldcollect.core.authorization import Action, Decision, authorize
from fieldcollect.core.errors import AuthenticationRequired, PermissionDenied
from fieldcollect.core.security import decode_token
from fieldcollect.db.session import SessionLocal
from fieldcollect.models.user import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_db() -> Generator:
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Get current authenticated user from JWT token
    """
    if credentials is None:
        raise AuthenticationRequired()

    try:
        payload = decode_token(credentials.credentials)
        sub_value = payload.get("sub")
        if sub_value is None:
            raise AuthenticationRequired("Invalid authentication credentials")
        user_id = int(sub_value)
    except (ValueError, TypeError):
        raise AuthenticationRequired("Invalid authentication credentials")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise AuthenticationRequired("User not found")

    if not user.is_active:
        raise AuthenticationRequired("Inactive user")

    return user


def require_action(action: Action):
    """
    Dependency factory that authorizes exactly one action per request

    Usage:
        @router.delete("/{record_id}")
        async def delete(user: User = Depends(require_action(Action.DELETE_RECORD))):
            ...
    """
    def action_checker(current_user: User = Depends(get_current_user)) -> User:
        if authorize(current_user, action) != Decision.ALLOW:
            logger.warning(
                "Permission denied: user=%s role=%s action=%s",
                current_user.id, current_user.role, action.value,
            )
            raise PermissionDenied(action.value)
        return current_user
    return action_checker
