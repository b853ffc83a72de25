"""Patient database model."""

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, String, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from frontdesk.utils.datetime_utils import utc_now

if TYPE_CHECKING:
    from frontdesk.models.registration import Registration

MEDICAL_RECORD_NO_CONSTRAINT = UniqueConstraint("medical_record_no", name="uq_patients_medical_record_no")


class Patient(SQLModel, table=True):
    """Patient record identified by a daily-sequenced medical record number."""

    __tablename__ = "patients"
    __table_args__ = (MEDICAL_RECORD_NO_CONSTRAINT,)

    id: int | None = Field(default=None, primary_key=True)

    # Issued RM code, e.g. "251212001". Never changes after insert.
    medical_record_no: str = Field(sa_column=Column(String(32), nullable=False, index=True))

    full_name: str = Field(index=True)
    date_of_birth: date
    gender: str | None = Field(default=None, max_length=16)
    phone: str | None = None
    address: str | None = None
    photo_url: str | None = None  # Stored as given; upload handled elsewhere

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    deleted_at: datetime | None = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))

    # Relationships
    registrations: list["Registration"] = Relationship(back_populates="patient")

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
