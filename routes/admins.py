"""Administrator account management for signed-in administrators."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import BadRequest, Conflict

from models import Admin, db
from utils.principals import principal_type_for
from utils.request_validation import (
    email_field,
    parse_json_request,
    password_field,
    string_field,
)
from utils.session_gate import current_session, session_required
from utils.tokens import ADMIN

admins_bp = Blueprint("admins", __name__)


def _serialize(admin: Admin) -> dict:
    data = principal_type_for(ADMIN).profile(admin)
    data["verified"] = admin.verified
    data["createdAt"] = admin.created_at.isoformat() if admin.created_at else None
    return data


def _ensure_email_free(email: str, *, exclude_id: int | None = None) -> None:
    existing = Admin.find_by_email(email)
    if existing is not None and existing.id != exclude_id:
        raise Conflict("An admin with that email already exists.")


def _commit_or_conflict() -> None:
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise Conflict("An admin with that email already exists.") from exc


def _acting_admin_id() -> str:
    claims = current_session()
    return claims.id if claims else "?"


@admins_bp.route("", methods=["GET"])
@session_required(ADMIN)
def list_admins():
    admins = Admin.query.order_by(Admin.created_at.asc(), Admin.id.asc()).all()
    return jsonify({"admins": [_serialize(admin) for admin in admins]})


@admins_bp.route("/<int:admin_id>", methods=["GET"])
@session_required(ADMIN)
def get_admin(admin_id: int):
    return jsonify(_serialize(Admin.query.get_or_404(admin_id)))


@admins_bp.route("", methods=["POST"])
@session_required(ADMIN)
def create_admin():
    """Create another administrator; the account is usable immediately."""

    data = parse_json_request(request, required_keys=("name", "email", "password"))
    email = email_field(data)
    password = password_field(data)
    _ensure_email_free(email)

    admin = Admin(name=string_field(data, "name"), email=email, verified=True)
    admin.set_password(password)
    db.session.add(admin)
    _commit_or_conflict()

    current_app.logger.info("Admin %s created admin %s", _acting_admin_id(), admin.id)
    return jsonify(_serialize(admin)), HTTPStatus.CREATED


@admins_bp.route("/<int:admin_id>", methods=["PATCH"])
@session_required(ADMIN)
def update_admin(admin_id: int):
    """Change the name, email or password of an administrator."""

    admin = Admin.query.get_or_404(admin_id)
    data = parse_json_request(request)

    if not any(key in data for key in ("name", "email", "password")):
        raise BadRequest("Nothing to update; send name, email or password.")

    if "name" in data:
        name = string_field(data, "name")
        if not name:
            raise BadRequest("Name must not be blank.")
        admin.name = name
    if "email" in data:
        email = email_field(data)
        _ensure_email_free(email, exclude_id=admin.id)
        admin.email = email
    if "password" in data:
        admin.set_password(password_field(data))

    _commit_or_conflict()
    current_app.logger.info("Admin %s updated admin %s", _acting_admin_id(), admin.id)
    return jsonify(_serialize(admin))


@admins_bp.route("/<int:admin_id>", methods=["DELETE"])
@session_required(ADMIN)
def delete_admin(admin_id: int):
    admin = Admin.query.get_or_404(admin_id)
    if str(admin.id) == _acting_admin_id():
        raise BadRequest("Administrators cannot delete their own account.")

    db.session.delete(admin)
    db.session.commit()

    current_app.logger.info("Admin %s deleted admin %s", _acting_admin_id(), admin_id)
    return jsonify({"success": True, "message": "Admin deleted."})
