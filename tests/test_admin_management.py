"""Tests for the administrator management endpoints."""

from __future__ import annotations

import pytest

from models import Admin
from utils.tokens import ADMIN, SCHOOL

PASSWORD = "CorrectHorse1"
ADMINS_URL = "/api/admin/admins"


@pytest.fixture()
def signed_in_admin(client, make_principal) -> int:
    admin_id = make_principal(ADMIN, "root@example.com")
    response = client.post(
        "/api/auth/admin/login", json={"email": "root@example.com", "password": PASSWORD}
    )
    assert response.status_code == 200
    return admin_id


def test_list_admins_hides_password_hash(client, signed_in_admin):
    response = client.get(ADMINS_URL)

    assert response.status_code == 200
    admins = response.get_json()["admins"]
    assert [admin["id"] for admin in admins] == [signed_in_admin]
    assert admins[0]["email"] == "root@example.com"
    assert "password" not in response.get_data(as_text=True)


def test_get_admin_by_id(client, signed_in_admin):
    response = client.get(f"{ADMINS_URL}/{signed_in_admin}")

    assert response.status_code == 200
    assert response.get_json()["name"] == "Site Admin"
    assert "password_hash" not in response.get_json()


def test_get_unknown_admin_is_not_found(client, signed_in_admin):
    assert client.get(f"{ADMINS_URL}/999").status_code == 404


def test_create_admin_can_log_in(app, client, signed_in_admin):
    response = client.post(
        ADMINS_URL,
        json={"name": "Second Admin", "email": "Second@Example.com", "password": "an0ther-pass"},
    )

    assert response.status_code == 201
    created = response.get_json()
    assert created["email"] == "second@example.com"
    assert created["verified"] is True
    assert "password" not in response.get_data(as_text=True)

    response = client.post(
        "/api/auth/admin/login",
        json={"email": "second@example.com", "password": "an0ther-pass"},
    )
    assert response.status_code == 200


def test_create_admin_with_taken_email_conflicts(client, signed_in_admin):
    response = client.post(
        ADMINS_URL,
        json={"name": "Copy", "email": "ROOT@example.com", "password": PASSWORD},
    )

    assert response.status_code == 409


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "No Email", "password": PASSWORD},
        {"name": "Bad Email", "email": 42, "password": PASSWORD},
        {"name": "Short", "email": "short@example.com", "password": "abc"},
    ],
)
def test_create_admin_validates_fields(client, signed_in_admin, payload):
    assert client.post(ADMINS_URL, json=payload).status_code == 400


def test_update_admin_name_and_password(app, client, signed_in_admin, make_principal):
    other_id = make_principal(ADMIN, "other@example.com")

    response = client.patch(
        f"{ADMINS_URL}/{other_id}", json={"name": "Renamed", "password": "fresh-pass-1"}
    )

    assert response.status_code == 200
    assert response.get_json()["name"] == "Renamed"
    with app.app_context():
        other = Admin.query.get(other_id)
        assert other.check_password("fresh-pass-1") is True
        assert other.check_password(PASSWORD) is False


def test_update_admin_to_taken_email_conflicts(client, signed_in_admin, make_principal):
    other_id = make_principal(ADMIN, "other@example.com")

    response = client.patch(f"{ADMINS_URL}/{other_id}", json={"email": "root@example.com"})

    assert response.status_code == 409


def test_update_admin_requires_known_fields(client, signed_in_admin):
    response = client.patch(f"{ADMINS_URL}/{signed_in_admin}", json={"role": "owner"})

    assert response.status_code == 400


def test_delete_admin(app, client, signed_in_admin, make_principal):
    other_id = make_principal(ADMIN, "other@example.com")

    response = client.delete(f"{ADMINS_URL}/{other_id}")

    assert response.status_code == 200
    assert response.get_json()["success"] is True
    with app.app_context():
        assert Admin.query.get(other_id) is None
    assert client.delete(f"{ADMINS_URL}/{other_id}").status_code == 404


def test_admin_cannot_delete_own_account(client, signed_in_admin):
    response = client.delete(f"{ADMINS_URL}/{signed_in_admin}")

    assert response.status_code == 400


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", ADMINS_URL),
        ("get", f"{ADMINS_URL}/1"),
        ("post", ADMINS_URL),
        ("patch", f"{ADMINS_URL}/1"),
        ("delete", f"{ADMINS_URL}/1"),
    ],
)
def test_management_requires_admin_session(client, make_principal, method, path):
    make_principal(SCHOOL, "school@example.com")
    client.post(
        "/api/auth/school/login", json={"email": "school@example.com", "password": PASSWORD}
    )

    response = getattr(client, method)(path, json={"name": "x"})

    assert response.status_code == 401
    assert response.get_json()["kind"] == "TokenInvalid"
