"""
Authorization engine

``authorize(actor, action)`` is a pure decision over the actor's role and
effective permissions. Every Action has exactly one rule in ``_RULES``; an
Action without a rule fails at import time, and anything a rule does not
allow is denied.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from fieldcollect.core.permissions import Permission, Role, effective_permissions, parse_role

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    LIST_RECORDS = "listRecords"
    CREATE_RECORD = "createRecord"
    UPDATE_RECORD = "updateRecord"
    DELETE_RECORD = "deleteRecord"
    EXPORT_RECORDS = "exportRecords"
    LIST_CUSTOM_COLUMNS = "listCustomColumns"
    CREATE_CUSTOM_COLUMN = "createCustomColumn"
    UPDATE_CUSTOM_COLUMN = "updateCustomColumn"
    DELETE_CUSTOM_COLUMN = "deleteCustomColumn"
    LIST_AGENTS = "listAgents"
    CREATE_AGENT = "createAgent"
    UPDATE_AGENT = "updateAgent"
    LIST_SECONDARY_ADMINS = "listSecondaryAdmins"
    CREATE_SECONDARY_ADMIN = "createSecondaryAdmin"
    UPDATE_SECONDARY_ADMIN = "updateSecondaryAdmin"
    VIEW_STATS = "viewStats"


class Decision(str, enum.Enum):
    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True)
class ResourceContext:
    """What the action targets; carried into decision logs"""
    resource_type: Optional[str] = None
    resource_id: Optional[int] = None


Rule = Callable[[Role, frozenset], bool]


def _role_or_permission(roles, permission: Permission) -> Rule:
    def rule(role: Role, perms: frozenset) -> bool:
        return role in roles or permission in perms
    return rule


def _permission(permission: Permission) -> Rule:
    def rule(role: Role, perms: frozenset) -> bool:
        return permission in perms
    return rule


def _any_actor(role: Role, perms: frozenset) -> bool:
    return True


def _admin_only(role: Role, perms: frozenset) -> bool:
    # Secondary admins never manage secondary admins, whatever their grants
    return role == Role.ADMIN


_RULES: Dict[Action, Rule] = {
    Action.LIST_RECORDS: _role_or_permission({Role.ADMIN, Role.AGENT}, Permission.VIEW_RECORDS),
    Action.CREATE_RECORD: _role_or_permission({Role.AGENT}, Permission.ADD_RECORDS),
    Action.UPDATE_RECORD: _role_or_permission({Role.AGENT}, Permission.EDIT_RECORDS),
    Action.DELETE_RECORD: _permission(Permission.DELETE_RECORDS),
    Action.EXPORT_RECORDS: _permission(Permission.EXPORT_RECORDS),
    Action.LIST_CUSTOM_COLUMNS: _any_actor,
    Action.CREATE_CUSTOM_COLUMN: _permission(Permission.MANAGE_CUSTOM_COLUMNS),
    Action.UPDATE_CUSTOM_COLUMN: _permission(Permission.MANAGE_CUSTOM_COLUMNS),
    Action.DELETE_CUSTOM_COLUMN: _permission(Permission.MANAGE_CUSTOM_COLUMNS),
    Action.LIST_AGENTS: _role_or_permission({Role.ADMIN}, Permission.VIEW_AGENTS),
    Action.CREATE_AGENT: _permission(Permission.CREATE_AGENTS),
    Action.UPDATE_AGENT: _permission(Permission.EDIT_AGENTS),
    Action.LIST_SECONDARY_ADMINS: _admin_only,
    Action.CREATE_SECONDARY_ADMIN: _admin_only,
    Action.UPDATE_SECONDARY_ADMIN: _admin_only,
    Action.VIEW_STATS: _permission(Permission.VIEW_STATS),
}

_missing_rules = set(Action) - set(_RULES)
if _missing_rules:
    raise RuntimeError(
        f"Authorization rules missing for actions: {sorted(a.value for a in _missing_rules)}"
    )


def is_authenticated(actor: Any) -> bool:
    """An actor counts as authenticated only when present, active and of a known role"""
    if actor is None:
        return False
    if not getattr(actor, "is_active", False):
        return False
    return parse_role(getattr(actor, "role", None)) is not None


def authorize(actor: Any, action: Action, resource: Optional[ResourceContext] = None) -> Decision:
    """
    Decide whether the actor may perform the action.

    Args:
        actor: object exposing ``id``, ``role``, ``permissions`` and
            ``is_active`` (a User row or anything shaped like one), or None
        action: the requested Action
        resource: optional target description, used for logging only

    Returns:
        Decision.ALLOW or Decision.DENY; denial is a result, never raised
    """
    if not is_authenticated(actor):
        logger.debug("Deny %s: unauthenticated actor", action.value)
        return Decision.DENY

    role = parse_role(actor.role)
    rule = _RULES.get(action)
    if rule is not None and rule(role, effective_permissions(actor)):
        return Decision.ALLOW

    logger.info(
        "Deny %s for user id=%s role=%s resource=%s",
        action.value, getattr(actor, "id", None), role.value, resource,
    )
    return Decision.DENY


def is_allowed(actor: Any, action: Action, resource: Optional[ResourceContext] = None) -> bool:
    return authorize(actor, action, resource) == Decision.ALLOW


def resolve_collected_by(actor: Any, requested: Optional[int]) -> int:
    """
    Owner id to store on a new record.

    Agents are always credited themselves, whatever the body says. Admins
    and secondary admins may credit another user and default to themselves.
    """
    role = parse_role(actor.role)
    if role in (Role.ADMIN, Role.SECONDARY_ADMIN) and requested:
        return int(requested)
    return actor.id


def may_reassign_owner(actor: Any) -> bool:
    """Only admin-side actors holding editRecords may change collectedBy"""
    role = parse_role(actor.role)
    return role != Role.AGENT and Permission.EDIT_RECORDS in effective_permissions(actor)
