"""Daily sequence counter model."""

from datetime import date, datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Integer, PrimaryKeyConstraint, String
from sqlmodel import Field, SQLModel

from frontdesk.utils.datetime_utils import utc_now

SEQUENCE_COUNTER_PK = PrimaryKeyConstraint("sequence_date", "sequence_type", name="pk_sequence_counters")


class SequenceCounter(SQLModel, table=True):
    """Last issued counter value for one (UTC date, sequence type) pair.

    Rows are created by the first issuance of the day and only ever
    incremented afterwards, through the atomic upsert in
    ``frontdesk.services.sequences.counter_store``. Old rows stay as an
    audit trail.
    """

    __tablename__ = "sequence_counters"
    __table_args__ = (
        SEQUENCE_COUNTER_PK,
        CheckConstraint("last_value >= 1", name="ck_sequence_counters_last_value_positive"),
    )

    sequence_date: date = Field(sa_column=Column(Date, nullable=False))
    sequence_type: str = Field(sa_column=Column(String(16), nullable=False))
    last_value: int = Field(sa_column=Column(Integer, nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
