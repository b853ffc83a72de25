"""Database models."""

# ruff: noqa: I001 - Import order matters for SQLAlchemy relationship resolution
from sqlmodel import SQLModel

from frontdesk.models.enums import Gender, SequenceType
from frontdesk.models.sequence_counter import SequenceCounter

# patient.py must be imported first (defines Patient), then registration.py (references it)
from frontdesk.models.patient import Patient
from frontdesk.models.registration import Registration

__all__ = [
    "SQLModel",
    "Gender",
    "SequenceType",
    "SequenceCounter",
    "Patient",
    "Registration",
]
