"""Table of principal types driving login, session checks and gating."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from models import Admin, Donor, GoverningBody, School

from .errors import EmailNotVerified, PendingApproval
from .tokens import ADMIN, DONOR, GOVERN_BODY, SCHOOL, SessionClaims


def require_verified_email(principal) -> None:
    if not principal.verified:
        raise EmailNotVerified()


def require_admin_approval(principal) -> None:
    if not principal.admin_verified:
        raise PendingApproval()


@dataclass(frozen=True)
class PrincipalType:
    """Everything that differs between the four kinds of account."""

    role: str
    slug: str
    model: type
    lookup: Callable[[str], object]
    cookie_name: str
    response_key: str
    name_attribute: str
    public_id_attribute: Optional[str]
    public_id_key: Optional[str]
    login_path: str
    home_path: str
    checks: tuple = field(default_factory=tuple)
    accepts_bearer: bool = False

    def public_id(self, principal) -> Optional[str]:
        if self.public_id_attribute is None:
            return None
        return getattr(principal, self.public_id_attribute)

    def profile(self, principal) -> dict:
        """Minimal public view of ``principal``; never includes the password hash."""

        data = {"id": principal.id}
        if self.public_id_key:
            data[self.public_id_key] = self.public_id(principal)
        data["name"] = getattr(principal, self.name_attribute)
        data["email"] = principal.email
        return data

    def claims_for(self, principal) -> SessionClaims:
        return SessionClaims(
            id=str(principal.id),
            role=self.role,
            email=principal.email,
            secondary_id=self.public_id(principal),
        )

    def load(self, claims: SessionClaims):
        """Fetch the principal a verified token refers to, if it still exists."""

        try:
            principal_id = int(claims.id)
        except (TypeError, ValueError):
            return None
        return self.model.query.get(principal_id)


# Lambdas resolve the classmethod at call time so tests can patch the models.
PRINCIPAL_TYPES = {
    ADMIN: PrincipalType(
        role=ADMIN,
        slug="admin",
        model=Admin,
        lookup=lambda email: Admin.find_by_email(email),
        cookie_name="adminToken",
        response_key="admin",
        name_attribute="name",
        public_id_attribute=None,
        public_id_key=None,
        login_path="/admin/login",
        home_path="/admin/dashboard",
        checks=(require_verified_email,),
        accepts_bearer=True,
    ),
    SCHOOL: PrincipalType(
        role=SCHOOL,
        slug="school",
        model=School,
        lookup=lambda email: School.find_by_email(email),
        cookie_name="auth_token",
        response_key="school",
        name_attribute="name",
        public_id_attribute="school_id",
        public_id_key="schoolId",
        login_path="/login",
        home_path="/schools",
        checks=(require_verified_email, require_admin_approval),
    ),
    DONOR: PrincipalType(
        role=DONOR,
        slug="donor",
        model=Donor,
        lookup=lambda email: Donor.find_by_email(email),
        cookie_name="donor_token",
        response_key="donor",
        name_attribute="display_name",
        public_id_attribute="donor_id",
        public_id_key="donorId",
        login_path="/login",
        home_path="/donors",
        checks=(require_verified_email,),
    ),
    GOVERN_BODY: PrincipalType(
        role=GOVERN_BODY,
        slug="govern",
        model=GoverningBody,
        lookup=lambda email: GoverningBody.find_by_email(email),
        cookie_name="govern_token",
        response_key="governBody",
        name_attribute="name",
        public_id_attribute="govern_body_id",
        public_id_key="governBodyId",
        login_path="/login",
        home_path="/governBody",
        checks=(require_verified_email, require_admin_approval),
    ),
}

_BY_SLUG = {kind.slug: kind for kind in PRINCIPAL_TYPES.values()}


def principal_type_for(role: str) -> Optional[PrincipalType]:
    return PRINCIPAL_TYPES.get(role)


def principal_type_for_slug(slug: str) -> Optional[PrincipalType]:
    return _BY_SLUG.get(slug)


def all_cookie_names() -> list[str]:
    return [kind.cookie_name for kind in PRINCIPAL_TYPES.values()]
