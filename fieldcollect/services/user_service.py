"""
User service - agents and secondary admins

Agent endpoints only ever touch role=agent users and secondary-admin
endpoints only role=secondary_admin users; any other id is not found.
"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from fieldcollect.core.errors import NotFound, ValidationFailed
from fieldcollect.core.permissions import Role, normalize_permissions_map, parse_role
from fieldcollect.core.security import hash_password, verify_password
from fieldcollect.models.user import User
from fieldcollect.schemas.user import (
    AgentCreate,
    AgentUpdate,
    SecondaryAdminCreate,
    SecondaryAdminUpdate,
    UserOut,
)
from fieldcollect.services.audit_service import log_audit

logger = logging.getLogger(__name__)


def to_user_out(user: User) -> UserOut:
    """Output view; the permission map is only shown for secondary admins"""
    permissions = None
    if parse_role(user.role) == Role.SECONDARY_ADMIN:
        permissions = normalize_permissions_map(user.permissions)
    return UserOut(
        id=user.id,
        username=user.username,
        full_name=user.full_name,
        phone=user.phone,
        role=Role(user.role),
        permissions=permissions,
        is_active=user.is_active,
        created_at=user.created_at,
    )


def get_user(db: Session, user_id: int) -> Optional[User]:
    """Get a user by ID"""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """Get a user by username (case-insensitive)"""
    return db.query(User).filter(func.lower(User.username) == func.lower(username)).first()


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    """Return the user when the credentials match, else None"""
    user = get_user_by_username(db, username)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def _ensure_unique_username(db: Session, username: str, exclude_id: Optional[int] = None) -> None:
    existing = get_user_by_username(db, username)
    if existing and existing.id != exclude_id:
        raise ValidationFailed("username", "Username already exists")


def _get_user_with_role(db: Session, user_id: int, role: Role, label: str) -> User:
    user = db.query(User).filter(User.id == user_id, User.role == role.value).first()
    if not user:
        raise NotFound(label, user_id)
    return user


def _create_user(db: Session, data: AgentCreate, role: Role, actor_id: int, permissions=None) -> User:
    _ensure_unique_username(db, data.username)

    user = User(
        username=data.username,
        password_hash=hash_password(data.password),
        full_name=data.full_name,
        phone=data.phone,
        role=role.value,
        permissions=permissions,
        is_active=data.is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="CREATE",
        entity_type=role.value,
        entity_id=user.id,
        meta={"username": user.username, "permissions": permissions},
    )
    logger.info("User %s (%s) created by user %s", user.username, role.value, actor_id)
    return user


def _apply_common_updates(db: Session, user: User, update_dict: dict) -> None:
    if update_dict.get("username") is not None:
        _ensure_unique_username(db, update_dict["username"], exclude_id=user.id)
        user.username = update_dict["username"]
    if update_dict.get("password") is not None:
        user.password_hash = hash_password(update_dict["password"])
    if update_dict.get("full_name") is not None:
        user.full_name = update_dict["full_name"]
    if "phone" in update_dict:
        user.phone = update_dict["phone"]
    if update_dict.get("is_active") is not None:
        user.is_active = update_dict["is_active"]


def _audit_update(db: Session, user: User, update_dict: dict, actor_id: int) -> None:
    changed = {k: v for k, v in update_dict.items() if k != "password"}
    if "password" in update_dict:
        changed["password_changed"] = True
    log_audit(
        db=db,
        actor_id=actor_id,
        action="UPDATE",
        entity_type=user.role,
        entity_id=user.id,
        meta={"username": user.username, "updated_fields": changed},
    )


def list_agents(db: Session) -> List[User]:
    """All field agents, oldest first"""
    return db.query(User).filter(User.role == Role.AGENT.value).order_by(User.id.asc()).all()


def create_agent(db: Session, agent_data: AgentCreate, actor_id: int) -> User:
    """
    Create a field agent

    Raises:
        ValidationFailed: If the username is taken
    """
    return _create_user(db, agent_data, Role.AGENT, actor_id)


def update_agent(db: Session, agent_id: int, agent_data: AgentUpdate, actor_id: int) -> User:
    """
    Update a field agent

    Raises:
        NotFound: If no agent has this id
        ValidationFailed: If the new username is taken
    """
    agent = _get_user_with_role(db, agent_id, Role.AGENT, "Agent")
    update_dict = agent_data.model_dump(exclude_unset=True)
    _apply_common_updates(db, agent, update_dict)
    db.commit()
    db.refresh(agent)
    _audit_update(db, agent, update_dict, actor_id)
    return agent


def list_secondary_admins(db: Session) -> List[User]:
    """All secondary admins, oldest first"""
    return (
        db.query(User)
        .filter(User.role == Role.SECONDARY_ADMIN.value)
        .order_by(User.id.asc())
        .all()
    )


def create_secondary_admin(db: Session, admin_data: SecondaryAdminCreate, actor_id: int) -> User:
    """
    Create a secondary admin with an explicit permission map

    Raises:
        ValidationFailed: If the username is taken
    """
    permissions = normalize_permissions_map(
        {perm.value: granted for perm, granted in admin_data.permissions.items()}
    )
    return _create_user(db, admin_data, Role.SECONDARY_ADMIN, actor_id, permissions=permissions)


def update_secondary_admin(
    db: Session,
    admin_id: int,
    admin_data: SecondaryAdminUpdate,
    actor_id: int,
) -> User:
    """
    Update a secondary admin; a provided permission map replaces the old one

    Raises:
        NotFound: If no secondary admin has this id
        ValidationFailed: If the new username is taken
    """
    admin = _get_user_with_role(db, admin_id, Role.SECONDARY_ADMIN, "Secondary admin")
    update_dict = admin_data.model_dump(exclude_unset=True)
    _apply_common_updates(db, admin, update_dict)

    if admin_data.permissions is not None:
        admin.permissions = normalize_permissions_map(
            {perm.value: granted for perm, granted in admin_data.permissions.items()}
        )

    db.commit()
    db.refresh(admin)
    _audit_update(db, admin, update_dict, actor_id)
    return admin
