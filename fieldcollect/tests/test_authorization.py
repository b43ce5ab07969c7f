"""
Tests for the authorization engine decision table
"""
import pytest

from fieldcollect.core.authorization import (
    Action,
    Decision,
    authorize,
    is_allowed,
    may_reassign_owner,
    resolve_collected_by,
    _RULES,
)
from fieldcollect.core.permissions import Permission, Role
from fieldcollect.models.user import User


def make_actor(role, permissions=None, user_id=7, is_active=True):
    return User(
        id=user_id,
        username=f"user{user_id}",
        role=role.value,
        permissions=permissions,
        is_active=is_active,
    )


def all_granted():
    return {p.value: True for p in Permission}


AGENT_ALLOWED = {
    Action.LIST_RECORDS,
    Action.CREATE_RECORD,
    Action.UPDATE_RECORD,
    Action.LIST_CUSTOM_COLUMNS,
}


def test_every_action_has_a_rule():
    assert set(_RULES) == set(Action)


@pytest.mark.parametrize("action", list(Action))
def test_unauthenticated_actor_is_denied_everything(action):
    assert authorize(None, action) == Decision.DENY


@pytest.mark.parametrize("action", list(Action))
def test_inactive_admin_is_denied_everything(action):
    assert authorize(make_actor(Role.ADMIN, is_active=False), action) == Decision.DENY


def test_unknown_role_is_denied():
    actor = User(id=1, username="x", role="superuser", permissions=all_granted(), is_active=True)
    assert authorize(actor, Action.LIST_CUSTOM_COLUMNS) == Decision.DENY


@pytest.mark.parametrize("action", list(Action))
def test_admin_is_allowed_everything(action):
    assert authorize(make_actor(Role.ADMIN), action) == Decision.ALLOW


@pytest.mark.parametrize("action", list(Action))
def test_agent_role_shortcuts(action):
    expected = Decision.ALLOW if action in AGENT_ALLOWED else Decision.DENY
    assert authorize(make_actor(Role.AGENT), action) == expected


def test_agent_permission_map_grants_nothing_extra():
    agent = make_actor(Role.AGENT, all_granted())
    assert authorize(agent, Action.DELETE_RECORD) == Decision.DENY
    assert authorize(agent, Action.VIEW_STATS) == Decision.DENY


@pytest.mark.parametrize("action", list(Action))
def test_secondary_admin_without_grants(action):
    expected = Decision.ALLOW if action == Action.LIST_CUSTOM_COLUMNS else Decision.DENY
    assert authorize(make_actor(Role.SECONDARY_ADMIN, {}), action) == expected


@pytest.mark.parametrize(
    "permission,action",
    [
        (Permission.VIEW_RECORDS, Action.LIST_RECORDS),
        (Permission.ADD_RECORDS, Action.CREATE_RECORD),
        (Permission.EDIT_RECORDS, Action.UPDATE_RECORD),
        (Permission.DELETE_RECORDS, Action.DELETE_RECORD),
        (Permission.EXPORT_RECORDS, Action.EXPORT_RECORDS),
        (Permission.MANAGE_CUSTOM_COLUMNS, Action.CREATE_CUSTOM_COLUMN),
        (Permission.MANAGE_CUSTOM_COLUMNS, Action.UPDATE_CUSTOM_COLUMN),
        (Permission.MANAGE_CUSTOM_COLUMNS, Action.DELETE_CUSTOM_COLUMN),
        (Permission.VIEW_AGENTS, Action.LIST_AGENTS),
        (Permission.CREATE_AGENTS, Action.CREATE_AGENT),
        (Permission.EDIT_AGENTS, Action.UPDATE_AGENT),
        (Permission.VIEW_STATS, Action.VIEW_STATS),
    ],
)
def test_secondary_admin_single_grant_unlocks_its_action(permission, action):
    granted = make_actor(Role.SECONDARY_ADMIN, {permission.value: True})
    denied = make_actor(Role.SECONDARY_ADMIN, {permission.value: False})
    assert authorize(granted, action) == Decision.ALLOW
    assert authorize(denied, action) == Decision.DENY


@pytest.mark.parametrize("permission", list(Permission))
def test_every_permission_unlocks_something(permission):
    """No permission in the vocabulary is dead weight"""
    baseline = make_actor(Role.SECONDARY_ADMIN, {})
    granted = make_actor(Role.SECONDARY_ADMIN, {permission.value: True})
    unlocked = [a for a in Action if is_allowed(granted, a) and not is_allowed(baseline, a)]
    assert unlocked


@pytest.mark.parametrize("value", [True, False, None])
def test_view_stats_follows_flag(value):
    permissions = {} if value is None else {"viewStats": value}
    actor = make_actor(Role.SECONDARY_ADMIN, permissions)
    assert (authorize(actor, Action.VIEW_STATS) == Decision.ALLOW) is (value is True)


@pytest.mark.parametrize(
    "action",
    [Action.LIST_SECONDARY_ADMINS, Action.CREATE_SECONDARY_ADMIN, Action.UPDATE_SECONDARY_ADMIN],
)
def test_secondary_admin_management_is_admin_only(action):
    """Even a fully-granted secondary admin cannot manage secondary admins"""
    assert authorize(make_actor(Role.SECONDARY_ADMIN, all_granted()), action) == Decision.DENY
    assert authorize(make_actor(Role.AGENT, all_granted()), action) == Decision.DENY
    assert authorize(make_actor(Role.ADMIN), action) == Decision.ALLOW


def test_resolve_collected_by_agent_always_self():
    agent = make_actor(Role.AGENT, user_id=3)
    assert resolve_collected_by(agent, None) == 3
    assert resolve_collected_by(agent, 99) == 3


def test_resolve_collected_by_admin_side_may_attribute():
    admin = make_actor(Role.ADMIN, user_id=1)
    sub = make_actor(Role.SECONDARY_ADMIN, {"addRecords": True}, user_id=2)
    assert resolve_collected_by(admin, 5) == 5
    assert resolve_collected_by(admin, None) == 1
    assert resolve_collected_by(sub, 5) == 5


def test_may_reassign_owner():
    assert may_reassign_owner(make_actor(Role.ADMIN))
    assert may_reassign_owner(make_actor(Role.SECONDARY_ADMIN, {"editRecords": True}))
    assert not may_reassign_owner(make_actor(Role.SECONDARY_ADMIN, {"addRecords": True}))
    assert not may_reassign_owner(make_actor(Role.AGENT))
