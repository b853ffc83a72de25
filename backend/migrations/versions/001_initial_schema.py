"""Initial schema: sequence counters, patients, registrations.

Revision ID: 001
Revises:
Create Date: 2025-12-12

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # One row per (UTC day, sequence type); the composite key is the upsert conflict target
    op.create_table(
        "sequence_counters",
        sa.Column("sequence_date", sa.Date(), nullable=False),
        sa.Column("sequence_type", sa.String(length=16), nullable=False),
        sa.Column("last_value", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("sequence_date", "sequence_type", name="pk_sequence_counters"),
        sa.CheckConstraint("last_value >= 1", name="ck_sequence_counters_last_value_positive"),
    )

    op.create_table(
        "patients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("medical_record_no", sa.String(length=32), nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("gender", sa.String(length=16), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("photo_url", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("medical_record_no", name="uq_patients_medical_record_no"),
    )
    op.create_index("ix_patients_medical_record_no", "patients", ["medical_record_no"])
    op.create_index("ix_patients_full_name", "patients", ["full_name"])

    op.create_table(
        "registrations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("registration_no", sa.String(length=32), nullable=False),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("registration_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("registration_no", name="uq_registrations_registration_no"),
    )
    op.create_index("ix_registrations_registration_no", "registrations", ["registration_no"])
    op.create_index("ix_registrations_patient_id", "registrations", ["patient_id"])
    op.create_index("ix_registrations_registration_date", "registrations", ["registration_date"])


def downgrade() -> None:
    op.drop_index("ix_registrations_registration_date", table_name="registrations")
    op.drop_index("ix_registrations_patient_id", table_name="registrations")
    op.drop_index("ix_registrations_registration_no", table_name="registrations")
    op.drop_table("registrations")

    op.drop_index("ix_patients_full_name", table_name="patients")
    op.drop_index("ix_patients_medical_record_no", table_name="patients")
    op.drop_table("patients")

    op.drop_table("sequence_counters")
