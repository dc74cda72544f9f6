"""Request gate deciding allow / redirect-to-login / redirect-to-home.

Every request is classified once, before routing, from the request path and
the role cookies it carries. Which prefixes need which role is declared in
``PROTECTED_ROUTES`` and ``LOGIN_ROUTES`` below.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from functools import wraps
from typing import Mapping, Optional

from flask import Flask, current_app, g, redirect, request

from . import tokens
from .errors import TokenInvalid
from .login_flow import clear_session_cookie
from .principals import PrincipalType, principal_type_for
from .tokens import ADMIN, DONOR, GOVERN_BODY, SCHOOL, SessionClaims, TokenVerificationError


@dataclass(frozen=True)
class ProtectedRoute:
    prefix: str
    role: str
    excluded: tuple = ()


@dataclass(frozen=True)
class LoginRoute:
    prefix: str
    roles: tuple


PROTECTED_ROUTES = (
    ProtectedRoute("/admin", ADMIN, excluded=("/admin/login",)),
    ProtectedRoute("/schools", SCHOOL),
    ProtectedRoute("/donors", DONOR),
    ProtectedRoute("/governBody", GOVERN_BODY),
)

LOGIN_ROUTES = (
    LoginRoute("/admin/login", (ADMIN,)),
    LoginRoute("/login", (SCHOOL, GOVERN_BODY, DONOR)),
)


class GateDecision(enum.Enum):
    ALLOWED = "allowed"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_HOME = "redirect_home"


@dataclass(frozen=True)
class GateOutcome:
    decision: GateDecision
    location: Optional[str] = None
    claims: Optional[SessionClaims] = None
    clear_cookie: Optional[str] = None


ALLOW = GateOutcome(GateDecision.ALLOWED)


def _matches(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer" or not value.strip():
        return None
    return value.strip()


def extract_token(
    kind: PrincipalType,
    cookies: Mapping[str, str],
    authorization: Optional[str] = None,
) -> Optional[str]:
    """Return the session token for ``kind`` from cookies (or bearer header)."""

    token = cookies.get(kind.cookie_name)
    if not token and kind.accepts_bearer:
        token = _bearer_token(authorization)
    return token or None


def verify_for_role(token: str, kind: PrincipalType) -> SessionClaims:
    """Verify ``token`` and insist its role tag is ``kind.role``."""

    try:
        claims = tokens.verify(token)
    except TokenVerificationError as exc:
        current_app.logger.info(
            "Rejected %s session token: %s", kind.role, exc.kind.value
        )
        raise
    if claims.role != kind.role:
        current_app.logger.info(
            "Rejected %s session token carrying role %s", kind.role, claims.role
        )
        raise TokenVerificationError(
            tokens.TokenErrorKind.MALFORMED, "Token role does not match route."
        )
    return claims


def _classify_protected(
    route: ProtectedRoute,
    cookies: Mapping[str, str],
    authorization: Optional[str],
) -> GateOutcome:
    kind = principal_type_for(route.role)
    token = extract_token(kind, cookies, authorization)
    if token is None:
        return GateOutcome(GateDecision.REDIRECT_LOGIN, location=kind.login_path)

    try:
        claims = tokens.verify(token)
    except TokenVerificationError as exc:
        current_app.logger.info(
            "Session gate rejected %s token: %s", kind.role, exc.kind.value
        )
        stale = kind.cookie_name if cookies.get(kind.cookie_name) else None
        return GateOutcome(
            GateDecision.REDIRECT_LOGIN,
            location=kind.login_path,
            clear_cookie=stale,
        )

    if claims.role != kind.role:
        current_app.logger.info(
            "Session gate rejected role %s on %s route", claims.role, kind.role
        )
        return GateOutcome(GateDecision.REDIRECT_LOGIN, location=kind.login_path)

    return GateOutcome(GateDecision.ALLOWED, claims=claims)


def _classify_login(route: LoginRoute, cookies: Mapping[str, str]) -> GateOutcome:
    for role in route.roles:
        kind = principal_type_for(role)
        token = cookies.get(kind.cookie_name)
        if not token:
            continue
        try:
            claims = tokens.verify(token)
        except TokenVerificationError:
            continue
        if claims.role == kind.role:
            return GateOutcome(
                GateDecision.REDIRECT_HOME, location=kind.home_path, claims=claims
            )
    return ALLOW


def classify(
    path: str,
    cookies: Mapping[str, str],
    authorization: Optional[str] = None,
) -> GateOutcome:
    """Classify one request. Never raises for bad tokens."""

    for login_route in LOGIN_ROUTES:
        if _matches(path, login_route.prefix):
            return _classify_login(login_route, cookies)

    for route in PROTECTED_ROUTES:
        if not _matches(path, route.prefix):
            continue
        if any(_matches(path, excluded) for excluded in route.excluded):
            return ALLOW
        return _classify_protected(route, cookies, authorization)

    return ALLOW


def current_session() -> Optional[SessionClaims]:
    """Claims of the session admitted for the current request, if any."""
    return g.get("session_claims")


def init_session_gate(app: Flask) -> None:
    """Run :func:`classify` before every request of ``app``."""

    @app.before_request
    def _gate_request():
        outcome = classify(
            request.path,
            request.cookies,
            request.headers.get("Authorization"),
        )
        if outcome.decision is GateDecision.ALLOWED:
            if outcome.claims is not None:
                g.session_claims = outcome.claims
            return None

        response = redirect(outcome.location)
        if outcome.clear_cookie:
            clear_session_cookie(response, outcome.clear_cookie)
        return response


def session_required(role: str):
    """Protect a JSON endpoint; unlike the gate, failures are 401 responses."""

    kind = principal_type_for(role)
    if kind is None:
        raise ValueError(f"Unknown role: {role!r}")

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            token = extract_token(
                kind, request.cookies, request.headers.get("Authorization")
            )
            if token is None:
                raise TokenInvalid("Authentication required.")
            try:
                g.session_claims = verify_for_role(token, kind)
            except TokenVerificationError as exc:
                raise TokenInvalid() from exc
            return func(*args, **kwargs)

        return wrapper

    return decorator
