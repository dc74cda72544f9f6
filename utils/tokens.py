"""Session token issuance and verification.

Tokens are HS256 JWTs minted through Flask-JWT-Extended. The principal id is
the ``sub`` claim; the role tag, email and role-specific secondary id travel
as additional claims. There is no server-side session state: a token either
verifies completely or is rejected.
"""

from __future__ import annotations

import binascii
import enum
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from flask import current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import ExpiredSignatureError, InvalidSignatureError, InvalidTokenError
from jwt.algorithms import get_default_algorithms
from jwt.utils import base64url_decode, base64url_encode

from .errors import ConfigurationError

ADMIN = "admin"
SCHOOL = "school"
DONOR = "donor"
GOVERN_BODY = "governBody"

# Name of the claim carrying each role's public identifier.
SECONDARY_ID_CLAIMS = {
    ADMIN: None,
    SCHOOL: "schoolId",
    DONOR: "donorId",
    GOVERN_BODY: "governBodyId",
}
ROLES = tuple(SECONDARY_ID_CLAIMS)

_NOT_BASE64URL = re.compile(r"[^A-Za-z0-9_-]")


@dataclass(frozen=True)
class SessionClaims:
    """Identity claims embedded in a session token."""

    id: str
    role: str
    email: str
    secondary_id: Optional[str] = None
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    def identity(self) -> tuple:
        """Return the claims that survive an issue/verify round trip."""
        return (self.id, self.role, self.email, self.secondary_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "role": self.role,
            "email": self.email,
            "secondaryId": self.secondary_id,
            "issuedAt": self.issued_at.isoformat() if self.issued_at else None,
            "expiresAt": self.expires_at.isoformat() if self.expires_at else None,
        }


class TokenErrorKind(enum.Enum):
    MALFORMED = "Malformed"
    SIGNATURE_INVALID = "SignatureInvalid"
    EXPIRED = "Expired"


class TokenVerificationError(Exception):
    """Raised when a session token does not fully verify."""

    def __init__(self, kind: TokenErrorKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind


def _require_secret() -> None:
    if not current_app.config.get("JWT_SECRET_KEY"):
        raise ConfigurationError("JWT_SECRET_KEY is not configured.")


def issue(claims: SessionClaims) -> str:
    """Sign ``claims`` into a token expiring after ``SESSION_LIFETIME``."""

    _require_secret()
    if claims.role not in SECONDARY_ID_CLAIMS:
        raise ValueError(f"Unknown role: {claims.role!r}")

    additional = {"role": claims.role, "email": claims.email}
    secondary_claim = SECONDARY_ID_CLAIMS[claims.role]
    if secondary_claim and claims.secondary_id is not None:
        additional[secondary_claim] = claims.secondary_id

    return create_access_token(
        identity=str(claims.id),
        additional_claims=additional,
        expires_delta=current_app.config["SESSION_LIFETIME"],
    )


def _timestamp(value) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


def _signature_matches(segments: list[str]) -> bool:
    """Check the HMAC of the raw ``header.payload`` text against the signature."""

    algorithm = get_default_algorithms().get(current_app.config["JWT_ALGORITHM"])
    if algorithm is None:
        return False
    try:
        signature = base64url_decode(segments[2].encode("ascii"))
    except (binascii.Error, UnicodeEncodeError, ValueError):
        return False
    key = algorithm.prepare_key(current_app.config["JWT_SECRET_KEY"])
    signing_input = f"{segments[0]}.{segments[1]}".encode("utf-8", "replace")
    return algorithm.verify(signing_input, key, signature)


def _has_canonical_signature(token: str) -> bool:
    # Unused low bits of the last base64 character must be zero.
    segment = token.rsplit(".", 1)[-1]
    try:
        decoded = base64url_decode(segment.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError, ValueError):
        return False
    return base64url_encode(decoded).decode("ascii") == segment


def _classify_decode_failure(token: str) -> TokenErrorKind:
    """Tell tampered tokens apart from ones that were never well formed.

    Claims are parsed before the signature is checked, so a modified token can
    fail as undecodable. A three-segment token whose HMAC does not match is
    reported as a bad signature, as is one whose separator was replaced but
    still reads as three base64url runs. ``Malformed`` is left for input with
    no token shape and for correctly signed tokens with unusable claims.
    """

    segments = token.split(".")
    if len(segments) != 3:
        runs = _NOT_BASE64URL.split(token)
        if len(runs) == 3 and all(runs):
            return TokenErrorKind.SIGNATURE_INVALID
        return TokenErrorKind.MALFORMED
    if _signature_matches(segments):
        return TokenErrorKind.MALFORMED
    return TokenErrorKind.SIGNATURE_INVALID


def verify(token: str) -> SessionClaims:
    """Validate signature and expiry of ``token`` and return its claims."""

    _require_secret()
    if not token or not isinstance(token, str):
        raise TokenVerificationError(TokenErrorKind.MALFORMED, "Token is empty.")

    try:
        payload = decode_token(token)
    except ExpiredSignatureError as exc:
        raise TokenVerificationError(TokenErrorKind.EXPIRED, str(exc)) from exc
    except InvalidSignatureError as exc:
        raise TokenVerificationError(TokenErrorKind.SIGNATURE_INVALID, str(exc)) from exc
    except (InvalidTokenError, JWTExtendedException, ValueError) as exc:
        raise TokenVerificationError(_classify_decode_failure(token), str(exc)) from exc

    if not _has_canonical_signature(token):
        raise TokenVerificationError(
            TokenErrorKind.SIGNATURE_INVALID, "Signature encoding is not canonical."
        )

    role = payload.get("role")
    subject = payload.get("sub")
    if role not in SECONDARY_ID_CLAIMS or not subject:
        raise TokenVerificationError(
            TokenErrorKind.MALFORMED, "Token is missing identity claims."
        )
    if payload.get("exp") is None:
        raise TokenVerificationError(TokenErrorKind.MALFORMED, "Token has no expiry.")

    secondary_claim = SECONDARY_ID_CLAIMS[role]
    return SessionClaims(
        id=str(subject),
        role=role,
        email=payload.get("email") or "",
        secondary_id=payload.get(secondary_claim) if secondary_claim else None,
        issued_at=_timestamp(payload.get("iat")),
        expires_at=_timestamp(payload.get("exp")),
    )
