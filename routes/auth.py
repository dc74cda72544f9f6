"""Authentication blueprint: login, session check and logout per principal."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import NotFound

from utils.errors import TokenInvalid
from utils.login_flow import attach_session_cookie, clear_session_cookie, login as login_principal
from utils.principals import (
    PrincipalType,
    all_cookie_names,
    principal_type_for,
    principal_type_for_slug,
)
from utils.request_validation import login_credentials
from utils.session_gate import extract_token, verify_for_role
from utils.tokens import TokenVerificationError

auth_bp = Blueprint("auth", __name__)


def _principal_type_or_404(slug: str) -> PrincipalType:
    kind = principal_type_for_slug(slug)
    if kind is None:
        raise NotFound("Unknown account type.")
    return kind


@auth_bp.route("/<slug>/login", methods=["POST"])
def login(slug: str):
    """Authenticate a principal and set its session cookie."""

    kind = _principal_type_or_404(slug)
    email, password = login_credentials(request)
    result = login_principal(kind, email, password)

    response = jsonify({"success": True, kind.response_key: result.profile})
    response.status_code = HTTPStatus.OK
    return attach_session_cookie(response, kind, result.token)


@auth_bp.route("/<slug>/me", methods=["GET"])
def me(slug: str):
    """Report whether the caller holds a valid session for this principal type."""

    kind = _principal_type_or_404(slug)
    token = extract_token(kind, request.cookies, request.headers.get("Authorization"))
    if token is None:
        return jsonify({"authenticated": False}), HTTPStatus.UNAUTHORIZED

    try:
        claims = verify_for_role(token, kind)
    except TokenVerificationError as exc:
        raise TokenInvalid() from exc

    principal = kind.load(claims)
    if principal is None:
        current_app.logger.info("Session for missing %s %s", kind.role, claims.id)
        raise TokenInvalid()

    return (
        jsonify({"authenticated": True, kind.response_key: kind.profile(principal)}),
        HTTPStatus.OK,
    )


@auth_bp.route("/logout", methods=["POST"])
def logout():
    """Clear the caller's session cookie, or every session cookie."""

    payload = request.get_json(silent=True)
    user_type = payload.get("userType") if isinstance(payload, dict) else None

    kind = principal_type_for(user_type) if isinstance(user_type, str) else None
    cookie_names = [kind.cookie_name] if kind is not None else all_cookie_names()

    response = jsonify({"success": True, "message": "Logged out successfully."})
    for cookie_name in cookie_names:
        clear_session_cookie(response, cookie_name)
    current_app.logger.info("Cleared session cookies: %s", ", ".join(cookie_names))
    return response
