"""
Tests for the custom column registry endpoints
"""
from fastapi import status

from fieldcollect.models.audit_log import AuditLog
from fieldcollect.models.record import Record


COLUMNS_URL = "/api/v1/custom-columns"


def create_roof_column(client, headers, **overrides):
    payload = {"name": "Roof Type", "fieldType": "select", "options": ["Tile", "Metal"]}
    payload.update(overrides)
    return client.post(COLUMNS_URL, json=payload, headers=headers)


def test_admin_creates_and_lists_columns(client, db, admin_user, agent_user, auth_headers):
    response = create_roof_column(client, auth_headers("admin", "adminpass"))
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["name"] == "Roof Type"
    assert data["fieldType"] == "select"
    assert data["options"] == ["Tile", "Metal"]
    assert data["isRequired"] is False
    assert data["isActive"] is True

    # Any authenticated user may read the registry
    listed = client.get(COLUMNS_URL, headers=auth_headers("agent1", "agentpass"))
    assert listed.status_code == status.HTTP_200_OK
    assert [c["name"] for c in listed.json()] == ["Roof Type"]

    audit = db.query(AuditLog).filter(AuditLog.entity_type == "custom_column").one()
    assert audit.action == "CREATE"


def test_options_are_trimmed_and_deduplicated(client, admin_user, auth_headers):
    response = create_roof_column(
        client, auth_headers("admin", "adminpass"), name="  Wall  ", options=[" Brick", "Brick", "", "Stone"]
    )
    assert response.json()["name"] == "Wall"
    assert response.json()["options"] == ["Brick", "Stone"]


def test_list_requires_authentication(client):
    assert client.get(COLUMNS_URL).status_code == status.HTTP_401_UNAUTHORIZED


def test_active_only_filter(client, admin_user, auth_headers):
    headers = auth_headers("admin", "adminpass")
    create_roof_column(client, headers)
    create_roof_column(client, headers, name="Old Column", fieldType="text", options=None, isActive=False)

    all_columns = client.get(COLUMNS_URL, headers=headers).json()
    active = client.get(COLUMNS_URL, params={"activeOnly": "true"}, headers=headers).json()
    assert [c["name"] for c in all_columns] == ["Roof Type", "Old Column"]
    assert [c["name"] for c in active] == ["Roof Type"]


def test_duplicate_name_is_rejected_case_insensitively(client, admin_user, auth_headers):
    headers = auth_headers("admin", "adminpass")
    create_roof_column(client, headers)
    response = create_roof_column(client, headers, name="roof type")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["field"] == "name"


def test_select_without_options_is_invalid(client, admin_user, auth_headers):
    response = create_roof_column(client, auth_headers("admin", "adminpass"), options=[])
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_options_on_non_select_are_invalid(client, admin_user, auth_headers):
    response = create_roof_column(client, auth_headers("admin", "adminpass"), fieldType="number")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_unknown_field_type_is_invalid(client, admin_user, auth_headers):
    response = create_roof_column(client, auth_headers("admin", "adminpass"), fieldType="date")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_manage_permission_gates_writes(client, agent_user, make_secondary_admin, auth_headers):
    make_secondary_admin(viewRecords=True)
    make_secondary_admin(manageCustomColumns=True)

    assert create_roof_column(client, auth_headers("agent1", "agentpass")).status_code == 403
    assert create_roof_column(client, auth_headers("sub1", "subpass")).status_code == 403
    assert create_roof_column(client, auth_headers("sub2", "subpass")).status_code == 201


def test_update_column(client, admin_user, auth_headers):
    headers = auth_headers("admin", "adminpass")
    column_id = create_roof_column(client, headers).json()["id"]

    response = client.put(
        f"{COLUMNS_URL}/{column_id}",
        json={"options": ["Tile", "Metal", "Thatch"], "isRequired": True},
        headers=headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["options"] == ["Tile", "Metal", "Thatch"]
    assert response.json()["isRequired"] is True


def test_update_to_text_clears_options(client, admin_user, auth_headers):
    headers = auth_headers("admin", "adminpass")
    column_id = create_roof_column(client, headers).json()["id"]

    response = client.put(f"{COLUMNS_URL}/{column_id}", json={"fieldType": "text"}, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["fieldType"] == "text"
    assert response.json()["options"] is None


def test_update_to_select_needs_options(client, admin_user, auth_headers):
    headers = auth_headers("admin", "adminpass")
    column_id = create_roof_column(client, headers, name="Rooms", fieldType="number", options=None).json()["id"]

    response = client.put(f"{COLUMNS_URL}/{column_id}", json={"fieldType": "select"}, headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["field"] == "options"


def test_update_rename_collision(client, admin_user, auth_headers):
    headers = auth_headers("admin", "adminpass")
    create_roof_column(client, headers)
    other_id = create_roof_column(client, headers, name="Wall").json()["id"]

    response = client.put(f"{COLUMNS_URL}/{other_id}", json={"name": "ROOF TYPE"}, headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_update_and_delete_missing_column_is_404(client, admin_user, auth_headers):
    headers = auth_headers("admin", "adminpass")
    assert client.put(f"{COLUMNS_URL}/999", json={"isActive": False}, headers=headers).status_code == 404
    assert client.delete(f"{COLUMNS_URL}/999", headers=headers).status_code == 404


def test_delete_keeps_stored_record_values(client, db, admin_user, agent_user, auth_headers):
    admin = auth_headers("admin", "adminpass")
    agent = auth_headers("agent1", "agentpass")
    column_id = create_roof_column(client, admin).json()["id"]
    record = client.post(
        "/api/v1/records",
        json={"personType": "Tenant", "customFields": {"Roof Type": "Tile"}},
        headers=agent,
    ).json()

    response = client.delete(f"{COLUMNS_URL}/{column_id}", headers=admin)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(COLUMNS_URL, headers=admin).json() == []

    db.expire_all()
    stored = db.query(Record).filter(Record.id == record["id"]).one()
    assert stored.custom_fields == {"Roof Type": "Tile"}

    # Values with no active column are accepted on later writes
    updated = client.put(
        f"/api/v1/records/{record['id']}",
        json={"customFields": {"Roof Type": "Thatch"}},
        headers=agent,
    )
    assert updated.status_code == status.HTTP_200_OK
