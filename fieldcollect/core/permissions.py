"""
Permission model: roles, the closed permission vocabulary, and the grant set
an actor effectively holds.

Permission values are stored verbatim as keys of ``users.permissions`` and
must not be renamed without a data migration.
"""
import enum
from typing import Any, Dict, FrozenSet, Mapping, Optional


class Role(str, enum.Enum):
    ADMIN = "admin"
    SECONDARY_ADMIN = "secondary_admin"
    AGENT = "agent"


class Permission(str, enum.Enum):
    VIEW_RECORDS = "viewRecords"
    EDIT_RECORDS = "editRecords"
    DELETE_RECORDS = "deleteRecords"
    ADD_RECORDS = "addRecords"
    EXPORT_RECORDS = "exportRecords"
    VIEW_AGENTS = "viewAgents"
    CREATE_AGENTS = "createAgents"
    EDIT_AGENTS = "editAgents"
    MANAGE_CUSTOM_COLUMNS = "manageCustomColumns"
    VIEW_STATS = "viewStats"


ALL_PERMISSIONS: FrozenSet[Permission] = frozenset(Permission)


def parse_role(role: Any) -> Optional[Role]:
    """Role enum for an enum or stored string value; None when unrecognised"""
    if isinstance(role, Role):
        return role
    try:
        return Role(getattr(role, "value", role))
    except ValueError:
        return None


def normalize_permissions_map(permissions: Optional[Mapping[str, Any]]) -> Dict[str, bool]:
    """
    Full permission map with every known key present.

    Missing keys become False; unknown keys are dropped; only a literal
    ``True`` grants.
    """
    permissions = permissions or {}
    return {perm.value: permissions.get(perm.value) is True for perm in Permission}


def effective_permissions(actor: Any) -> FrozenSet[Permission]:
    """
    Permissions the actor holds.

    admin holds every permission regardless of its stored map,
    secondary_admin holds exactly the keys mapped to True, and agent holds
    none (agent capabilities are role-gated in the authorization engine).
    """
    if actor is None:
        return frozenset()

    role = parse_role(getattr(actor, "role", None))
    if role == Role.ADMIN:
        return ALL_PERMISSIONS
    if role == Role.SECONDARY_ADMIN:
        granted = normalize_permissions_map(getattr(actor, "permissions", None))
        return frozenset(Permission(key) for key, value in granted.items() if value)
    return frozenset()


def has_permission(actor: Any, permission: Permission) -> bool:
    """True if the actor effectively holds the permission"""
    return permission in effective_permissions(actor)
