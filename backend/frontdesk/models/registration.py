"""Registration (visit) database model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from frontdesk.models.patient import Patient
from frontdesk.utils.datetime_utils import utc_now

REGISTRATION_NO_CONSTRAINT = UniqueConstraint("registration_no", name="uq_registrations_registration_no")


class Registration(SQLModel, table=True):
    """A patient's visit registration identified by a daily-sequenced number."""

    __tablename__ = "registrations"
    __table_args__ = (REGISTRATION_NO_CONSTRAINT,)

    id: int | None = Field(default=None, primary_key=True)

    # Issued REG code, e.g. "251212000001". Never changes after insert.
    registration_no: str = Field(sa_column=Column(String(32), nullable=False, index=True))

    patient_id: int = Field(sa_column=Column(Integer, ForeignKey("patients.id"), nullable=False, index=True))
    registration_date: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False, index=True))
    notes: str | None = None

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    deleted_at: datetime | None = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))

    # Relationships
    patient: Patient = Relationship(back_populates="registrations")

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
