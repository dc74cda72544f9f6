"""Credential columns and helpers shared by every principal model."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta

from sqlalchemy import func
from werkzeug.security import check_password_hash, generate_password_hash

from . import db


VERIFICATION_CODE_DIGITS = 6


def normalize_email(raw_email: object) -> str:
    """Normalize an email string by stripping whitespace and lowering case.

    Anything other than a string normalizes to an empty string.
    """
    if not isinstance(raw_email, str):
        return ""
    return raw_email.strip().lower()


class CredentialMixin:
    """Password hash, email-ownership flag and verification code columns."""

    password_hash = db.Column(db.String(255), nullable=False)
    verified = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=db.false(),
    )
    verification_code = db.Column(db.String(16), nullable=True)
    verification_code_expiry = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Column holding the login email; School keeps it under its contact details.
    email_attribute = "email"

    @classmethod
    def find_by_email(cls, email: str):
        """Return the principal registered under ``email`` (case-insensitive)."""

        column = getattr(cls, cls.email_attribute)
        return cls.query.filter(func.lower(column) == normalize_email(email)).first()

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def issue_verification_code(self, ttl: timedelta) -> str:
        """Generate a fresh numeric email verification code valid for ``ttl``."""

        code = str(secrets.randbelow(10**VERIFICATION_CODE_DIGITS)).zfill(
            VERIFICATION_CODE_DIGITS
        )
        self.verification_code = code
        self.verification_code_expiry = datetime.utcnow() + ttl
        return code

    def confirm_verification_code(self, code: str) -> bool:
        """Mark the email verified when ``code`` matches and has not expired."""

        if not self.verification_code or not code:
            return False
        if self.verification_code_expiry is None:
            return False
        if self.verification_code_expiry <= datetime.utcnow():
            return False
        if not secrets.compare_digest(self.verification_code, str(code).strip()):
            return False

        self.verified = True
        self.verification_code = None
        self.verification_code_expiry = None
        return True
