"""School model definition."""

from typing import Optional

from . import db
from .principal import CredentialMixin


class School(CredentialMixin, db.Model):
    """A school requesting sports equipment."""

    __tablename__ = "schools"

    email_attribute = "contact_email"

    id = db.Column(db.Integer, primary_key=True)
    school_id = db.Column(db.String(16), unique=True, nullable=True, index=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    district = db.Column(db.String(64), nullable=False)
    province = db.Column(db.String(64), nullable=False)
    zonal = db.Column(db.String(120), nullable=True)
    contact_email = db.Column(db.String(255), unique=True, nullable=False)
    contact_phone = db.Column(db.String(32), nullable=True)
    principal_name = db.Column(db.String(255), nullable=True)
    admin_verified = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=db.false(),
        index=True,
    )

    @property
    def email(self) -> Optional[str]:
        return self.contact_email

    def assign_public_id(self) -> None:
        """Derive the ``SCH00001`` style identifier from the primary key."""

        if self.school_id is None and self.id is not None:
            self.school_id = f"SCH{self.id:05d}"

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<School {self.school_id or self.id} {self.contact_email}>"
