"""Email verification and administrator approval of accounts."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask.typing import ResponseReturnValue
from werkzeug.exceptions import BadRequest, NotFound

from models import GoverningBody, School, db
from utils.principals import principal_type_for, principal_type_for_slug
from utils.request_validation import email_field, parse_json_request, string_field
from utils.session_gate import current_session, session_required
from utils.tokens import ADMIN, GOVERN_BODY, SCHOOL

verify_bp = Blueprint("verify", __name__)
admin_bp = Blueprint("admin_verify", __name__)

# Account kinds an administrator has to approve, keyed by URL segment.
_APPROVABLE = {
    "schools": SCHOOL,
    "govern-bodies": GOVERN_BODY,
}


@verify_bp.route("/<slug>/verify", methods=["POST"])
def verify_email(slug: str):
    """Confirm ownership of an email address with the emailed code."""

    kind = principal_type_for_slug(slug)
    if kind is None or kind.role == ADMIN:
        raise NotFound("Unknown account type.")

    payload = parse_json_request(request, required_keys=("email", "code"))
    email = email_field(payload)
    code = string_field(payload, "code")

    principal = kind.lookup(email)
    if principal is None or not principal.confirm_verification_code(code):
        raise BadRequest("Invalid or expired verification code.")

    approval_required = hasattr(principal, "admin_verified")
    if approval_required:
        principal.admin_verified = False
    db.session.commit()

    current_app.logger.info("Verified email for %s %s", kind.role, principal.id)
    message = "Email verified successfully."
    if approval_required:
        message += " Your account is pending admin review."
    return jsonify(
        {
            "success": True,
            "message": message,
            "adminVerificationRequired": approval_required,
        }
    )


def _serialize_pending(principal, slug: str) -> dict[str, object]:
    kind = principal_type_for_slug(slug)
    data = kind.profile(principal)
    data["type"] = kind.role
    data["createdAt"] = principal.created_at.isoformat() if principal.created_at else None
    return data


@admin_bp.route("/pending", methods=["GET"])
@session_required(ADMIN)
def list_pending_accounts() -> ResponseReturnValue:
    """Return email-verified schools and governing bodies awaiting approval."""

    schools = (
        School.query.filter_by(verified=True, admin_verified=False)
        .order_by(School.created_at.asc())
        .all()
    )
    bodies = (
        GoverningBody.query.filter_by(verified=True, admin_verified=False)
        .order_by(GoverningBody.created_at.asc())
        .all()
    )
    return jsonify(
        {
            "schools": [_serialize_pending(school, "school") for school in schools],
            "governBodies": [_serialize_pending(body, "govern") for body in bodies],
        }
    )


@admin_bp.route("/<kind_segment>/<int:principal_id>/approve", methods=["POST"])
@session_required(ADMIN)
def approve_account(kind_segment: str, principal_id: int):
    """Approve a school or governing body so that it can log in."""

    role = _APPROVABLE.get(kind_segment)
    if role is None:
        raise NotFound("Unknown account type.")

    principal = principal_type_for(role).model.query.get(principal_id)
    if principal is None:
        raise NotFound("Account not found.")
    if not principal.verified:
        raise BadRequest("Account email has not been verified yet.")

    principal.admin_verified = True
    db.session.commit()

    reviewer = current_session()
    current_app.logger.info(
        "Admin %s approved %s %s", reviewer.id if reviewer else "?", role, principal.id
    )
    return jsonify({"id": principal.id, "type": role, "adminVerified": True})
