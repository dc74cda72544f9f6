"""Governing body model definition."""

from . import db
from .principal import CredentialMixin


class GoverningBody(CredentialMixin, db.Model):
    """A sports governing body overseeing equipment distribution."""

    __tablename__ = "governing_bodies"

    id = db.Column(db.Integer, primary_key=True)
    govern_body_id = db.Column(db.String(16), unique=True, nullable=True, index=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    abbreviation = db.Column(db.String(32), nullable=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=True)
    logo_url = db.Column(db.String(512), nullable=True)
    contact_phone = db.Column(db.String(32), nullable=True)
    website = db.Column(db.String(255), nullable=True)
    admin_verified = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=db.false(),
    )

    def assign_public_id(self) -> None:
        """Derive the ``GB0001`` style identifier from the primary key."""

        if self.govern_body_id is None and self.id is not None:
            self.govern_body_id = f"GB{self.id:04d}"

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<GoverningBody {self.govern_body_id or self.id} {self.email}>"
