"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from utils.principals import PRINCIPAL_TYPES  # noqa: E402
from utils.tokens import ADMIN, DONOR, GOVERN_BODY, SCHOOL  # noqa: E402

DEFAULT_PASSWORD = "CorrectHorse1"


class _BaseTestConfig(Config):
    TESTING = True
    APP_ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = "test-signing-secret-0123456789abcdef"
    AUTH_COOKIE_SECURE = False
    EXPOSE_ERROR_DETAILS = False
    RATE_LIMIT = "1000 per minute"


def _principal_fields(role: str, email: str) -> dict:
    if role == ADMIN:
        return {"name": "Site Admin", "email": email}
    if role == SCHOOL:
        return {
            "name": "Royal College",
            "contact_email": email,
            "district": "Colombo",
            "province": "Western",
        }
    if role == DONOR:
        return {"display_name": "Nimal Perera", "donor_type": "INDIVIDUAL", "email": email}
    if role == GOVERN_BODY:
        return {"name": "Sri Lanka Cricket", "email": email}
    raise ValueError(role)


@pytest.fixture()
def app() -> Flask:
    """Create a Flask application instance for tests."""

    application = create_app(_BaseTestConfig)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def make_principal(app: Flask):
    """Persist a principal of the given role and return its primary key."""

    def _make(
        role: str,
        email: str,
        password: str = DEFAULT_PASSWORD,
        *,
        verified: bool = True,
        admin_verified: bool = True,
    ) -> int:
        kind = PRINCIPAL_TYPES[role]
        principal = kind.model(**_principal_fields(role, email))
        principal.verified = verified
        if hasattr(principal, "admin_verified"):
            principal.admin_verified = admin_verified
        principal.set_password(password)

        with app.app_context():
            db.session.add(principal)
            db.session.flush()
            if hasattr(principal, "assign_public_id"):
                principal.assign_public_id()
            db.session.commit()
            return principal.id

    return _make
