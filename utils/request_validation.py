"""Parsing of JSON request bodies for the account endpoints."""

from __future__ import annotations

from typing import Iterable

from flask import Request
from werkzeug.exceptions import BadRequest

from models.principal import normalize_email

from .errors import MissingFields

MIN_PASSWORD_LENGTH = 6


def _json_object(req: Request) -> dict | None:
    if not req.is_json:
        return None
    data = req.get_json(silent=True)
    return data if isinstance(data, dict) else None


def string_field(data: dict, key: str) -> str:
    """Return ``data[key]`` stripped, or an empty string for non-string values."""

    value = data.get(key)
    if not isinstance(value, str):
        return ""
    return value.strip()


def parse_json_request(req: Request, *, required_keys: Iterable[str] = ()) -> dict:
    """Return the JSON object body or raise a 400 error.

    Every key in ``required_keys`` must hold a non-blank string.
    """

    data = _json_object(req)
    if not data:
        raise BadRequest("Request body must be a non-empty JSON object.")

    missing = sorted(key for key in required_keys if not string_field(data, key))
    if missing:
        raise BadRequest("Missing required fields: {}.".format(", ".join(missing)))
    return data


def email_field(data: dict, key: str = "email") -> str:
    email = normalize_email(data.get(key))
    if "@" not in email:
        raise BadRequest("A valid email address is required.")
    return email


def password_field(data: dict, key: str = "password") -> str:
    password = data.get(key)
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise BadRequest(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )
    return password


def login_credentials(req: Request) -> tuple[str, str]:
    """Return the raw ``(email, password)`` pair of a login body.

    A missing or malformed body is reported as missing credentials rather
    than as a generic bad request.
    """

    data = _json_object(req)
    if data is None:
        raise MissingFields()
    email = data.get("email")
    password = data.get("password")
    if not isinstance(email, str) or not isinstance(password, str):
        raise MissingFields()
    return email, password
