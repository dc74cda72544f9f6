"""End-to-end registration, email verification and approval tests."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from flask import Flask

from models import Donor, GoverningBody, School, db
from utils.tokens import ADMIN

PASSWORD = "CorrectHorse1"

SCHOOL_PAYLOAD = {
    "name": "Royal College",
    "email": "Office@RoyalCollege.lk",
    "password": PASSWORD,
    "district": "Colombo",
    "province": "Western",
    "phone": "0112345678",
}
DONOR_PAYLOAD = {
    "displayName": "Nimal Perera",
    "email": "nimal@example.com",
    "password": PASSWORD,
    "donorType": "individual",
}
GOVERN_PAYLOAD = {
    "name": "Sri Lanka Cricket",
    "email": "info@slc.lk",
    "password": PASSWORD,
}


def _code_for(app: Flask, model, **filters) -> str:
    with app.app_context():
        return model.query.filter_by(**filters).one().verification_code


def _admin_login(client, make_principal) -> None:
    make_principal(ADMIN, "admin@example.com")
    response = client.post(
        "/api/auth/admin/login",
        json={"email": "admin@example.com", "password": PASSWORD},
    )
    assert response.status_code == 200


def test_school_registration_to_login(app, client, make_principal):
    """A school can log in only after verifying its email and being approved."""

    response = client.post("/api/school", json=SCHOOL_PAYLOAD)
    assert response.status_code == 201
    school = response.get_json()["school"]
    assert school["email"] == "office@royalcollege.lk"
    assert school["schoolId"] == f"SCH{school['id']:05d}"
    assert "verification_code" not in response.get_data(as_text=True)

    login_payload = {"email": "office@royalcollege.lk", "password": PASSWORD}
    response = client.post("/api/auth/school/login", json=login_payload)
    assert response.get_json()["kind"] == "EmailNotVerified"

    code = _code_for(app, School, contact_email="office@royalcollege.lk")
    response = client.post(
        "/api/school/verify", json={"email": "office@royalcollege.lk", "code": code}
    )
    assert response.status_code == 200
    assert response.get_json()["adminVerificationRequired"] is True

    response = client.post("/api/auth/school/login", json=login_payload)
    assert response.get_json()["kind"] == "PendingApproval"

    _admin_login(client, make_principal)
    pending = client.get("/api/admin/pending").get_json()
    assert [entry["id"] for entry in pending["schools"]] == [school["id"]]
    assert pending["governBodies"] == []

    response = client.post(f"/api/admin/schools/{school['id']}/approve")
    assert response.status_code == 200
    assert response.get_json()["adminVerified"] is True

    response = client.post("/api/auth/school/login", json=login_payload)
    assert response.status_code == 200


def test_donor_registration_needs_only_email_verification(app, client):
    response = client.post("/api/donor", json=DONOR_PAYLOAD)
    assert response.status_code == 201
    donor = response.get_json()["donor"]
    assert donor["donorId"] == f"IND-{donor['id']:06d}"
    assert donor["name"] == "Nimal Perera"

    code = _code_for(app, Donor, email="nimal@example.com")
    response = client.post("/api/donor/verify", json={"email": "nimal@example.com", "code": code})
    assert response.status_code == 200
    assert response.get_json()["adminVerificationRequired"] is False

    response = client.post(
        "/api/auth/donor/login",
        json={"email": "nimal@example.com", "password": PASSWORD},
    )
    assert response.status_code == 200


def test_governing_body_is_listed_for_approval(app, client, make_principal):
    response = client.post("/api/govern", json=GOVERN_PAYLOAD)
    assert response.status_code == 201
    body_id = response.get_json()["governBody"]["id"]

    code = _code_for(app, GoverningBody, email="info@slc.lk")
    client.post("/api/govern/verify", json={"email": "info@slc.lk", "code": code})

    _admin_login(client, make_principal)
    pending = client.get("/api/admin/pending").get_json()
    assert [entry["id"] for entry in pending["governBodies"]] == [body_id]

    response = client.post(f"/api/admin/govern-bodies/{body_id}/approve")
    assert response.status_code == 200

    response = client.post(
        "/api/auth/govern/login", json={"email": "info@slc.lk", "password": PASSWORD}
    )
    assert response.status_code == 200


def test_duplicate_email_conflicts(client):
    assert client.post("/api/donor", json=DONOR_PAYLOAD).status_code == 201

    duplicate = dict(DONOR_PAYLOAD, email="NIMAL@example.com")
    response = client.post("/api/donor", json=duplicate)

    assert response.status_code == 409


def test_registration_validates_fields(client):
    missing = {key: value for key, value in SCHOOL_PAYLOAD.items() if key != "district"}
    assert client.post("/api/school", json=missing).status_code == 400

    bad_type = dict(DONOR_PAYLOAD, donorType="CHARITY")
    assert client.post("/api/donor", json=bad_type).status_code == 400

    short_password = dict(GOVERN_PAYLOAD, password="abc")
    assert client.post("/api/govern", json=short_password).status_code == 400


def test_wrong_verification_code_is_rejected(app, client):
    client.post("/api/donor", json=DONOR_PAYLOAD)
    code = _code_for(app, Donor, email="nimal@example.com")
    wrong = "000000" if code != "000000" else "111111"

    response = client.post("/api/donor/verify", json={"email": "nimal@example.com", "code": wrong})

    assert response.status_code == 400
    with app.app_context():
        assert Donor.query.filter_by(email="nimal@example.com").one().verified is False


def test_expired_verification_code_is_rejected(app, client):
    client.post("/api/donor", json=DONOR_PAYLOAD)
    with app.app_context():
        donor = Donor.query.filter_by(email="nimal@example.com").one()
        donor.verification_code_expiry = datetime.utcnow() - timedelta(seconds=1)
        code = donor.verification_code
        db.session.commit()

    response = client.post("/api/donor/verify", json={"email": "nimal@example.com", "code": code})

    assert response.status_code == 400


def test_admin_endpoints_require_admin_session(client, make_principal):
    assert client.get("/api/admin/pending").status_code == 401

    make_principal("school", "school@example.com")
    client.post(
        "/api/auth/school/login",
        json={"email": "school@example.com", "password": PASSWORD},
    )

    response = client.get("/api/admin/pending")
    assert response.status_code == 401
    assert response.get_json()["kind"] == "TokenInvalid"


def test_unverified_account_cannot_be_approved(app, client, make_principal):
    school_id = client.post("/api/school", json=SCHOOL_PAYLOAD).get_json()["school"]["id"]
    _admin_login(client, make_principal)

    response = client.post(f"/api/admin/schools/{school_id}/approve")

    assert response.status_code == 400
    with app.app_context():
        assert School.query.get(school_id).admin_verified is False


@pytest.mark.parametrize("email", [123, True, ["nimal@example.com"], {"address": "x"}, "not-an-email"])
def test_registration_rejects_non_string_email(client, email):
    payload = dict(DONOR_PAYLOAD, email=email)

    response = client.post("/api/donor", json=payload)

    assert response.status_code == 400
    assert response.get_json()["error"] == "Bad Request"


@pytest.mark.parametrize("email", [123, ["nimal@example.com"]])
def test_verification_rejects_non_string_email(client, email):
    client.post("/api/donor", json=DONOR_PAYLOAD)

    response = client.post("/api/donor/verify", json={"email": email, "code": "123456"})

    assert response.status_code == 400
