"""Database initialization and model exports."""

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()

# Import models to register them with SQLAlchemy metadata.
from .admin import Admin  # noqa: E402,F401
from .school import School  # noqa: E402,F401
from .donor import Donor, DONOR_TYPES  # noqa: E402,F401
from .governing_body import GoverningBody  # noqa: E402,F401

__all__ = [
    "db",
    "Admin",
    "School",
    "Donor",
    "DONOR_TYPES",
    "GoverningBody",
]
