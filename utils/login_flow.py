"""Credential login shared by every principal type."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from functools import lru_cache

from flask import Response, current_app
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from models.principal import normalize_email

from . import tokens
from .errors import AuthError, InvalidCredentials, MissingFields, StoreUnavailable
from .principals import PrincipalType


@lru_cache(maxsize=1)
def _placeholder_hash() -> str:
    return generate_password_hash(secrets.token_urlsafe(16))


@dataclass(frozen=True)
class LoginResult:
    token: str
    profile: dict


def login(kind: PrincipalType, email: str | None, password: str | None) -> LoginResult:
    """Authenticate ``email``/``password`` as ``kind`` and mint a session token.

    Failures raise the matching :mod:`utils.errors` exception; nothing is
    written on any failure path.
    """

    email = normalize_email(email)
    if not email or not password:
        raise MissingFields()

    try:
        principal = kind.lookup(email)
    except SQLAlchemyError as exc:
        current_app.logger.exception(
            "Credential store lookup failed for %s login", kind.role
        )
        raise StoreUnavailable() from exc

    try:
        if principal is None:
            # Spend the same hashing work as a real password check.
            check_password_hash(_placeholder_hash(), password)
            raise InvalidCredentials()

        for check in kind.checks:
            check(principal)

        if not principal.check_password(password):
            raise InvalidCredentials()
    except AuthError as exc:
        current_app.logger.info("Rejected %s login: %s", kind.role, exc.kind)
        raise

    token = tokens.issue(kind.claims_for(principal))
    current_app.logger.info("%s %s logged in", kind.role, principal.id)
    return LoginResult(token=token, profile=kind.profile(principal))


def attach_session_cookie(response: Response, kind: PrincipalType, token: str) -> Response:
    """Set the role's http-only session cookie on ``response``."""

    config = current_app.config
    response.set_cookie(
        kind.cookie_name,
        token,
        max_age=int(config["SESSION_LIFETIME"].total_seconds()),
        path="/",
        secure=bool(config.get("AUTH_COOKIE_SECURE")),
        httponly=True,
        samesite=config.get("AUTH_COOKIE_SAMESITE", "Strict"),
    )
    return response


def clear_session_cookie(response: Response, cookie_name: str) -> Response:
    config = current_app.config
    response.delete_cookie(
        cookie_name,
        path="/",
        secure=bool(config.get("AUTH_COOKIE_SECURE")),
        httponly=True,
        samesite=config.get("AUTH_COOKIE_SAMESITE", "Strict"),
    )
    return response
