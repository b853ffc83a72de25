"""Enum definitions for database models."""

from enum import StrEnum


class SequenceType(StrEnum):
    """Kind of daily sequence number. Each type keeps its own counter per day."""

    MEDICAL_RECORD = "RM"  # Medical Record Number (No. RM), one per patient
    REGISTRATION = "REG"  # Registration Number, one per visit


class Gender(StrEnum):
    """Accepted patient gender values."""

    MALE = "Male"
    FEMALE = "Female"
