from medtrack.models.audit_log import AuditLog
from medtrack.models.enums import Entity, Role


def test_navigation_follows_roles(client, auth_headers):
    response = client.get("/users/me/navigation", headers=auth_headers(Role.PHARMACIST))
    assert response.status_code == 200
    assert [item["label"] for item in response.json()] == ["Dashboard", "Inventory", "Orders", "Alerts"]

    response = client.get("/users/me/navigation", headers=auth_headers(Role.ADMIN))
    assert [item["path"] for item in response.json()][-1] == "/users"


def test_admin_lists_users_with_roles(client, auth_headers, make_user):
    make_user(Role.SUPPLIER)
    headers = auth_headers(Role.ADMIN)

    response = client.get("/users/", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert sorted(r for item in body["items"] for r in item["roles"]) == ["admin", "supplier"]


def test_non_admin_cannot_list_users(client, auth_headers):
    response = client.get("/users/", headers=auth_headers(Role.PHARMACIST))
    assert response.status_code == 403


def test_assign_role_replaces_existing_roles(client, db, auth_headers, make_user, login_as):
    target = make_user(Role.SUPPLIER, Role.PHARMACIST)
    headers = auth_headers(Role.ADMIN)

    response = client.put(f"/users/{target.id}/role", json={"role": "pharmacist"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["roles"] == ["pharmacist"]

    me = client.get("/users/me", headers=login_as(target)).json()
    assert me["roles"] == ["pharmacist"]
    assert me["role_label"] == "Pharmacist"

    logs = db.query(AuditLog).filter(AuditLog.entity == Entity.USER_ROLE).all()
    assert len(logs) == 1
    assert f"user_id={target.id}" in logs[0].details


def test_grant_and_revoke_roles(client, auth_headers, make_user):
    target = make_user(Role.SUPPLIER)
    headers = auth_headers(Role.ADMIN)

    response = client.post(f"/users/{target.id}/roles", json={"role": "pharmacist"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["roles"] == ["supplier", "pharmacist"]

    response = client.post(f"/users/{target.id}/roles", json={"role": "pharmacist"}, headers=headers)
    assert response.json()["roles"] == ["supplier", "pharmacist"]

    response = client.delete(f"/users/{target.id}/roles/supplier", headers=headers)
    assert response.status_code == 200
    assert response.json()["roles"] == ["pharmacist"]


def test_unknown_role_is_rejected(client, auth_headers, make_user):
    target = make_user()
    headers = auth_headers(Role.ADMIN)

    response = client.put(f"/users/{target.id}/role", json={"role": "Admin"}, headers=headers)
    assert response.status_code == 400
    response = client.delete(f"/users/{target.id}/roles/manager", headers=headers)
    assert response.status_code == 400


def test_only_admin_assigns_roles(client, auth_headers, make_user):
    target = make_user()
    response = client.put(f"/users/{target.id}/role", json={"role": "admin"}, headers=auth_headers(Role.SUPPLIER))
    assert response.status_code == 403


def test_assign_role_to_missing_user(client, auth_headers):
    response = client.put("/users/does-not-exist/role", json={"role": "admin"}, headers=auth_headers(Role.ADMIN))
    assert response.status_code == 404
