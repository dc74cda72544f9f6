"""Registration blueprint creating unverified school, donor and governing body accounts."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import BadRequest, Conflict

from models import DONOR_TYPES, Donor, GoverningBody, School, db
from utils.principals import principal_type_for_slug
from utils.request_validation import (
    email_field,
    parse_json_request,
    password_field,
    string_field,
)

register_bp = Blueprint("register", __name__)


def _build_school(payload: dict) -> School:
    return School(
        name=string_field(payload, "name"),
        contact_email=email_field(payload),
        contact_phone=string_field(payload, "phone") or None,
        principal_name=string_field(payload, "principalName") or None,
        district=string_field(payload, "district"),
        province=string_field(payload, "province"),
        zonal=string_field(payload, "zonal") or None,
    )


def _build_donor(payload: dict) -> Donor:
    donor_type = string_field(payload, "donorType").upper()
    if donor_type not in DONOR_TYPES:
        raise BadRequest("Donor type must be one of: INDIVIDUAL, COMPANY.")
    return Donor(
        display_name=string_field(payload, "displayName"),
        donor_type=donor_type,
        email=email_field(payload),
        phone=string_field(payload, "phone") or None,
        address=string_field(payload, "address") or None,
    )


def _build_governing_body(payload: dict) -> GoverningBody:
    return GoverningBody(
        name=string_field(payload, "name"),
        abbreviation=string_field(payload, "abbreviation") or None,
        email=email_field(payload),
        description=string_field(payload, "description") or None,
        contact_phone=string_field(payload, "phone") or None,
        website=string_field(payload, "website") or None,
    )


_BUILDERS = {
    "school": (("name", "email", "password", "district", "province"), _build_school),
    "donor": (("displayName", "email", "password", "donorType"), _build_donor),
    "govern": (("name", "email", "password"), _build_governing_body),
}


@register_bp.route("/<slug>", methods=["POST"])
def register(slug: str):
    """Create an account awaiting email verification."""

    if slug not in _BUILDERS:
        raise BadRequest("Unknown account type.")
    required_keys, builder = _BUILDERS[slug]
    kind = principal_type_for_slug(slug)

    payload = parse_json_request(request, required_keys=required_keys)
    principal = builder(payload)
    password = password_field(payload)

    if kind.lookup(principal.email) is not None:
        raise Conflict("An account with that email already exists.")

    principal.set_password(password)
    principal.issue_verification_code(current_app.config["VERIFICATION_CODE_TTL"])

    db.session.add(principal)
    try:
        db.session.flush()
        principal.assign_public_id()
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise Conflict("An account with that email already exists.") from exc

    # Delivery of the code by email happens outside this service.
    current_app.logger.info(
        "Registered %s %s; verification code issued", kind.role, principal.id
    )
    return (
        jsonify(
            {
                "message": "Registration successful. Please check your email to verify your account.",
                kind.response_key: kind.profile(principal),
            }
        ),
        HTTPStatus.CREATED,
    )
