"""Donor model definition."""

from . import db
from .principal import CredentialMixin


DONOR_TYPES = ("INDIVIDUAL", "COMPANY")
_DONOR_ID_PREFIXES = {"INDIVIDUAL": "IND", "COMPANY": "COM"}


class Donor(CredentialMixin, db.Model):
    """An individual or company donating equipment."""

    __tablename__ = "donors"

    id = db.Column(db.Integer, primary_key=True)
    donor_id = db.Column(db.String(16), unique=True, nullable=True, index=True)
    display_name = db.Column(db.String(255), nullable=False, index=True)
    donor_type = db.Column(
        db.Enum(*DONOR_TYPES, name="donor_type"),
        nullable=False,
        index=True,
    )
    email = db.Column(db.String(255), unique=True, nullable=False)
    phone = db.Column(db.String(32), nullable=True)
    address = db.Column(db.String(255), nullable=True)
    profile_pic_url = db.Column(db.String(512), nullable=True)

    def assign_public_id(self) -> None:
        """Derive ``IND-000001`` / ``COM-000001`` from the donor type and key."""

        if self.donor_id is None and self.id is not None:
            prefix = _DONOR_ID_PREFIXES.get(self.donor_type, "IND")
            self.donor_id = f"{prefix}-{self.id:06d}"

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Donor {self.donor_id or self.id} {self.email}>"
