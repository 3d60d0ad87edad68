"""Initial schema: schools, counselors, students, assessments, appointments

Revision ID: 3c1f8a2b7d4e
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3c1f8a2b7d4e"  # pragma: allowlist secret
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
            comment="Creation timestamp (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
            comment="Last update timestamp (UTC)",
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "schools",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID primary key"),
        sa.Column("school_name", sa.String(length=300), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False, comment="Login identifier"),
        sa.Column("address", sa.String(length=500), nullable=False),
        sa.Column("phone", sa.String(length=30), nullable=False),
        sa.Column(
            "school_type",
            sa.String(length=30),
            nullable=False,
            comment="primary, secondary, tertiary",
        ),
        sa.Column("website", sa.String(length=300), nullable=True),
        sa.Column("password_hash", sa.String(length=100), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "counselors",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID primary key"),
        sa.Column("school_id", sa.UUID(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False, comment="Login identifier"),
        sa.Column("password_hash", sa.String(length=100), nullable=False),
        sa.Column("specialization", sa.String(length=200), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("idx_counselors_school", "counselors", ["school_id"])

    op.create_table(
        "students",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID primary key"),
        sa.Column("school_id", sa.UUID(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column(
            "admission_number", sa.String(length=50), nullable=False, comment="Login identifier"
        ),
        sa.Column("password_hash", sa.String(length=100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("profile_complete", sa.Boolean(), nullable=False),
        sa.Column(
            "profile_status",
            postgresql.JSONB(),
            nullable=False,
            comment="Section name -> completed flag",
        ),
        sa.Column("personal_data", postgresql.JSONB(), nullable=True),
        sa.Column("family_background", postgresql.JSONB(), nullable=True),
        sa.Column("family_structure", postgresql.JSONB(), nullable=True),
        sa.Column("educational_background", postgresql.JSONB(), nullable=True),
        sa.Column("notes", postgresql.JSONB(), nullable=True),
        sa.Column("version_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("admission_number"),
    )
    op.create_index("idx_students_school", "students", ["school_id"])
    op.create_index(
        "idx_students_profile_complete", "students", ["school_id", "profile_complete"]
    )

    op.create_table(
        "assessments",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID primary key"),
        sa.Column("school_id", sa.UUID(), nullable=False),
        sa.Column("counselor_id", sa.UUID(), nullable=False),
        sa.Column("student_id", sa.UUID(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("physical_development", postgresql.JSONB(), nullable=False),
        sa.Column("physical_disabilities", postgresql.JSONB(), nullable=False),
        sa.Column("health_records", postgresql.JSONB(), nullable=False),
        sa.Column("discipline_records", postgresql.JSONB(), nullable=False),
        sa.Column("standardized_tests", postgresql.JSONB(), nullable=False),
        sa.Column("academic_records", postgresql.JSONB(), nullable=False),
        sa.Column("observations", postgresql.JSONB(), nullable=False),
        sa.Column("vocational_interests", postgresql.JSONB(), nullable=False),
        sa.Column("overall_remark", postgresql.JSONB(), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('ongoing', 'completed', 'false')", name="check_assessment_status"
        ),
        sa.ForeignKeyConstraint(["counselor_id"], ["counselors.id"]),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"]),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_assessments_school", "assessments", ["school_id"])
    op.create_index("idx_assessments_counselor", "assessments", ["counselor_id"])
    op.create_index("idx_assessments_student", "assessments", ["student_id"])
    op.create_index("idx_assessments_status", "assessments", ["status"])

    # At most one ongoing/completed assessment per student
    op.create_index(
        "uq_assessments_active_student",
        "assessments",
        ["student_id"],
        unique=True,
        postgresql_where=sa.text("status IN ('ongoing', 'completed')"),
    )

    op.create_table(
        "appointments",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID primary key"),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("student_id", sa.UUID(), nullable=False),
        sa.Column("counselor_id", sa.UUID(), nullable=False),
        sa.Column("school_id", sa.UUID(), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("background_color", sa.String(length=20), nullable=False),
        sa.Column("border_color", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "type IN ('counseling', 'workshop', 'group')", name="check_appointment_type"
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled')", name="check_appointment_status"
        ),
        sa.ForeignKeyConstraint(["counselor_id"], ["counselors.id"]),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"]),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_appointments_student_start", "appointments", ["student_id", "start"])
    op.create_index(
        "idx_appointments_counselor_start", "appointments", ["counselor_id", "start"]
    )
    op.create_index("idx_appointments_school_start", "appointments", ["school_id", "start"])
    op.create_index("idx_appointments_status", "appointments", ["status"])


def downgrade() -> None:
    op.drop_table("appointments")
    op.drop_index("uq_assessments_active_student", table_name="assessments")
    op.drop_table("assessments")
    op.drop_table("students")
    op.drop_table("counselors")
    op.drop_table("schools")
