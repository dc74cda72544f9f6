"""Authentication error taxonomy rendered by the JSON error handlers."""

from __future__ import annotations

from werkzeug.exceptions import BadRequest, InternalServerError, Unauthorized


class ConfigurationError(RuntimeError):
    """Fatal misconfiguration detected at startup (e.g. no signing secret)."""


class AuthError(Exception):
    """Mixin marking HTTP errors that belong to the authentication taxonomy."""

    kind = "AuthError"


class MissingFields(AuthError, BadRequest):
    kind = "MissingFields"
    description = "Email and password are required."


class InvalidCredentials(AuthError, Unauthorized):
    kind = "InvalidCredentials"
    description = "Invalid email or password."


class EmailNotVerified(AuthError, Unauthorized):
    kind = "EmailNotVerified"
    description = "Email not verified. Please check your email for the verification code."


class PendingApproval(AuthError, Unauthorized):
    kind = "PendingApproval"
    description = "Your account is pending approval from an administrator."


class TokenInvalid(AuthError, Unauthorized):
    kind = "TokenInvalid"
    description = "Invalid or expired session."


class StoreUnavailable(AuthError, InternalServerError):
    kind = "StoreUnavailable"
    description = "Authentication failed."


__all__ = [
    "AuthError",
    "ConfigurationError",
    "EmailNotVerified",
    "InvalidCredentials",
    "MissingFields",
    "PendingApproval",
    "StoreUnavailable",
    "TokenInvalid",
]
