"""
Tests for agent and secondary admin management
"""
from fastapi import status

from fieldcollect.core.security import verify_password
from fieldcollect.models.audit_log import AuditLog
from fieldcollect.models.user import User


AGENTS_URL = "/api/v1/agents"
SECONDARY_URL = "/api/v1/secondary-admins"


def agent_payload(**overrides):
    payload = {"username": "agent9", "password": "fieldpass", "fullName": "Peter Otieno", "phone": "0722000999"}
    payload.update(overrides)
    return payload


def test_admin_creates_agent(client, db, admin_user, auth_headers):
    response = client.post(AGENTS_URL, json=agent_payload(), headers=auth_headers("admin", "adminpass"))

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["username"] == "agent9"
    assert data["role"] == "agent"
    assert data["fullName"] == "Peter Otieno"
    assert data["permissions"] is None
    assert "password" not in data and "passwordHash" not in data

    user = db.query(User).filter(User.username == "agent9").one()
    assert verify_password("fieldpass", user.password_hash)

    audit = db.query(AuditLog).filter(AuditLog.entity_type == "agent").one()
    assert "password" not in (audit.meta_json or {})


def test_created_agent_can_log_in(client, admin_user, auth_headers):
    client.post(AGENTS_URL, json=agent_payload(), headers=auth_headers("admin", "adminpass"))
    headers = auth_headers("agent9", "fieldpass")
    assert client.get("/api/v1/records", headers=headers).status_code == 200


def test_duplicate_username_is_rejected(client, admin_user, agent_user, auth_headers):
    response = client.post(
        AGENTS_URL,
        json=agent_payload(username="AGENT1"),
        headers=auth_headers("admin", "adminpass"),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["field"] == "username"


def test_short_password_is_rejected(client, admin_user, auth_headers):
    response = client.post(AGENTS_URL, json=agent_payload(password="123"), headers=auth_headers("admin", "adminpass"))
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_list_agents_only_returns_agents(client, admin_user, agent_user, other_agent, make_secondary_admin, auth_headers):
    make_secondary_admin(viewAgents=True)
    response = client.get(AGENTS_URL, headers=auth_headers("sub1", "subpass"))
    assert response.status_code == status.HTTP_200_OK
    assert [a["username"] for a in response.json()] == ["agent1", "agent2"]


def test_agent_management_permissions(client, agent_user, make_secondary_admin, auth_headers):
    make_secondary_admin(viewAgents=True)
    make_secondary_admin(createAgents=True)

    assert client.get(AGENTS_URL, headers=auth_headers("agent1", "agentpass")).status_code == 403
    viewer = auth_headers("sub1", "subpass")
    creator = auth_headers("sub2", "subpass")
    assert client.post(AGENTS_URL, json=agent_payload(), headers=viewer).status_code == 403
    assert client.post(AGENTS_URL, json=agent_payload(), headers=creator).status_code == 201
    assert client.get(AGENTS_URL, headers=creator).status_code == 403


def test_update_agent(client, db, agent_user, make_secondary_admin, auth_headers):
    make_secondary_admin(editAgents=True)
    response = client.put(
        f"{AGENTS_URL}/{agent_user.id}",
        json={"fullName": "John Kariuki", "isActive": False},
        headers=auth_headers("sub1", "subpass"),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["fullName"] == "John Kariuki"
    assert response.json()["isActive"] is False

    login = client.post("/api/v1/auth/login", json={"username": "agent1", "password": "agentpass"})
    assert login.status_code == status.HTTP_403_FORBIDDEN


def test_update_agent_password(client, agent_user, admin_user, auth_headers):
    client.put(
        f"{AGENTS_URL}/{agent_user.id}",
        json={"password": "newsecret"},
        headers=auth_headers("admin", "adminpass"),
    )
    assert auth_headers("agent1", "newsecret")


def test_edit_agents_cannot_target_other_roles(client, admin_user, make_secondary_admin, auth_headers):
    editor = make_secondary_admin(editAgents=True)
    headers = auth_headers("sub1", "subpass")

    for target in (admin_user.id, editor.id):
        response = client.put(f"{AGENTS_URL}/{target}", json={"password": "takeover"}, headers=headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    assert auth_headers("admin", "adminpass")


def test_admin_creates_secondary_admin(client, db, admin_user, auth_headers):
    response = client.post(
        SECONDARY_URL,
        json=agent_payload(username="office1", fullName="Office Lead", permissions={"viewRecords": True, "viewStats": False}),
        headers=auth_headers("admin", "adminpass"),
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["role"] == "secondary_admin"
    assert data["permissions"]["viewRecords"] is True
    assert data["permissions"]["viewStats"] is False
    assert data["permissions"]["deleteRecords"] is False
    assert len(data["permissions"]) == 10

    headers = auth_headers("office1", "fieldpass")
    assert client.get("/api/v1/records", headers=headers).status_code == 200
    assert client.get("/api/v1/stats", headers=headers).status_code == 403


def test_unknown_permission_name_is_rejected(client, admin_user, auth_headers):
    response = client.post(
        SECONDARY_URL,
        json=agent_payload(username="office1", permissions={"superUser": True}),
        headers=auth_headers("admin", "adminpass"),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_secondary_admin_cannot_manage_secondary_admins(client, make_secondary_admin, auth_headers):
    """Holding every permission still does not allow it"""
    every = {
        "viewRecords": True, "editRecords": True, "deleteRecords": True, "addRecords": True,
        "exportRecords": True, "viewAgents": True, "createAgents": True, "editAgents": True,
        "manageCustomColumns": True, "viewStats": True,
    }
    sub = make_secondary_admin(**every)
    headers = auth_headers("sub1", "subpass")

    assert client.get(SECONDARY_URL, headers=headers).status_code == 403
    created = client.post(SECONDARY_URL, json=agent_payload(username="office2"), headers=headers)
    assert created.status_code == 403
    assert created.json()["action"] == "createSecondaryAdmin"
    assert client.put(f"{SECONDARY_URL}/{sub.id}", json={"permissions": {}}, headers=headers).status_code == 403


def test_update_secondary_admin_replaces_permissions(client, admin_user, make_secondary_admin, auth_headers):
    sub = make_secondary_admin(viewRecords=True, viewStats=True)
    response = client.put(
        f"{SECONDARY_URL}/{sub.id}",
        json={"permissions": {"exportRecords": True}},
        headers=auth_headers("admin", "adminpass"),
    )
    assert response.status_code == status.HTTP_200_OK
    granted = {k for k, v in response.json()["permissions"].items() if v}
    assert granted == {"exportRecords"}

    sub_headers = auth_headers("sub1", "subpass")
    assert client.get("/api/v1/records", headers=sub_headers).status_code == 403
    assert client.get("/api/v1/records/export.csv", headers=sub_headers).status_code == 200


def test_list_secondary_admins(client, admin_user, agent_user, make_secondary_admin, auth_headers):
    make_secondary_admin()
    make_secondary_admin(viewStats=True)
    response = client.get(SECONDARY_URL, headers=auth_headers("admin", "adminpass"))
    assert [u["username"] for u in response.json()] == ["sub1", "sub2"]


def test_update_secondary_admin_wrong_role_is_404(client, admin_user, agent_user, auth_headers):
    response = client.put(
        f"{SECONDARY_URL}/{agent_user.id}",
        json={"permissions": {"viewStats": True}},
        headers=auth_headers("admin", "adminpass"),
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
