"""Вход по логину и паролю, текущий сотрудник, проверка ролей."""
from datetime import datetime, timedelta

from conftest import auth_headers, make_staff
from stitchbook.models import StaffRole
from stitchbook.services.auth_service import issue_token


def test_login_returns_token(client, staff_member):
    r = client.post("/auth/login", data={"username": "Meena", "password": "secret"})
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["token_type"] == "bearer"
    assert data["staff"]["id"] == staff_member.id
    assert data["staff"]["role"] == "ROLE_STAFF"

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["login"] == "meena"
    ids = [m["id"] for m in me.json()["menu_items"]]
    assert "entries" in ids
    assert "rates" not in ids
    assert ids[-1] == "logout"


def test_admin_menu_has_management_items(client, admin_headers):
    ids = [m["id"] for m in client.get("/auth/me", headers=admin_headers).json()["menu_items"]]
    assert {"rates", "payments", "staff"} <= set(ids)


def test_login_with_wrong_password(client, staff_member):
    r = client.post("/auth/login", data={"username": "meena", "password": "nope"})
    assert r.status_code == 401
    r = client.post("/auth/login", data={"username": "nobody", "password": "secret"})
    assert r.status_code == 401


def test_me_requires_auth(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_expired_token_is_rejected(client, staff_member):
    old = issue_token(staff_member.id, now=datetime.utcnow() - timedelta(days=30))
    assert client.get("/auth/me", headers={"Authorization": f"Bearer {old}"}).status_code == 401


def test_deactivated_staff_loses_access(client, admin_headers):
    kavya = make_staff("Kavya", StaffRole.ROLE_STAFF, "kavya")
    headers = auth_headers(kavya)
    assert client.get("/auth/me", headers=headers).status_code == 200

    client.patch(f"/staff/{kavya.id}", json={"is_active": False}, headers=admin_headers)
    assert client.get("/auth/me", headers=headers).status_code == 401
    assert client.post("/auth/login", data={"username": "kavya", "password": "secret"}).status_code == 401


def test_deleted_staff_token_is_rejected(client, admin_headers):
    kavya = make_staff("Kavya", StaffRole.ROLE_STAFF, "kavya")
    headers = auth_headers(kavya)
    assert client.delete(f"/staff/{kavya.id}", headers=admin_headers).status_code == 200
    assert client.get("/stitch-entries", headers=headers).status_code == 401


def test_role_change_applies_to_existing_token(client, admin_headers):
    kavya = make_staff("Kavya", StaffRole.ROLE_STAFF, "kavya")
    headers = auth_headers(kavya)
    body = {"category": "shirt", "amount": 10}
    assert client.post("/rates", json=body, headers=headers).status_code == 403

    client.patch(f"/staff/{kavya.id}", json={"role": "ROLE_ADMIN"}, headers=admin_headers)
    assert client.post("/rates", json=body, headers=headers).status_code == 201


def test_admin_manages_staff(client, admin_headers, staff_headers):
    r = client.post(
        "/staff",
        json={"name": "Kavya", "phone_number": "9000000001", "login": "kavya", "password": "pw1234"},
        headers=admin_headers,
    )
    assert r.status_code == 201, r.text
    assert r.json()["role"] == "ROLE_STAFF"
    assert client.post("/auth/login", data={"username": "kavya", "password": "pw1234"}).status_code == 200
    assert client.post("/staff", json={"name": "X", "phone_number": "1", "login": "kavya"}, headers=admin_headers).status_code == 400
    assert client.post("/staff", json={"name": "Y", "phone_number": "2"}, headers=staff_headers).status_code == 403

    r = client.patch(f"/staff/{r.json()['id']}", json={"is_active": False}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["is_active"] is False
    active = [s["login"] for s in client.get("/staff", headers=staff_headers).json()]
    assert "kavya" not in active
