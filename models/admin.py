"""Site administrator model."""

from . import db
from .principal import CredentialMixin


class Admin(CredentialMixin, db.Model):
    """An operator of the platform who approves schools and governing bodies."""

    __tablename__ = "site_admins"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    # Provisioned by operators; verified from the start.
    verified = db.Column(
        db.Boolean,
        nullable=False,
        default=True,
        server_default=db.true(),
    )

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Admin {self.email}>"
