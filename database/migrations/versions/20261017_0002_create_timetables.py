"""create timetables, lecture summaries and student preferences

Revision ID: 20261017_0002
Revises: 20261017_0001
Create Date: 2026-10-17 00:10:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261017_0002"
down_revision = "20261017_0001"
branch_labels = None
depends_on = None


day_of_week_enum = sa.Enum(
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
    name="day_of_week",
)


def upgrade() -> None:
    op.create_table(
        "timetables",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "timetable_groups",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("timetable_id", sa.String(length=36), nullable=False),
        sa.Column("group_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("timetable_id", "group_id", name="uq_timetable_groups_timetable_group"),
    )
    op.create_index("ix_timetable_groups_timetable_id", "timetable_groups", ["timetable_id"])
    op.create_index("ix_timetable_groups_group_id", "timetable_groups", ["group_id"])

    op.create_table(
        "slot_types",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False, unique=True),
    )
    op.create_table(
        "batches",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False, unique=True),
    )

    op.create_table(
        "timetable_slots",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("timetable_id", sa.String(length=36), nullable=False),
        sa.Column("day", day_of_week_enum, nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("subject_name", sa.String(length=200), nullable=True),
        sa.Column("subject_short_name", sa.String(length=50), nullable=True),
        sa.Column("slot_type_id", sa.String(length=36), nullable=False),
        sa.Column("room_number", sa.String(length=50), nullable=True),
        sa.Column("faculty_id", sa.String(length=36), nullable=True),
        sa.Column("batch_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_timetable_slots_timetable_id", "timetable_slots", ["timetable_id"])
    op.create_index("ix_timetable_slots_faculty_id", "timetable_slots", ["faculty_id"])

    op.create_table(
        "lecture_summaries",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("slot_id", sa.String(length=36), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("author_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("slot_id", "date", name="uq_lecture_summaries_slot_date"),
    )
    op.create_index("ix_lecture_summaries_slot_id", "lecture_summaries", ["slot_id"])

    op.create_table(
        "student_preferences",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("enabled_slot_type_ids", sa.JSON(), nullable=True),
        sa.Column("selected_batch_ids", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_student_preferences_user_id", "student_preferences", ["user_id"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_student_preferences_user_id", table_name="student_preferences")
    op.drop_table("student_preferences")
    op.drop_index("ix_lecture_summaries_slot_id", table_name="lecture_summaries")
    op.drop_table("lecture_summaries")
    op.drop_index("ix_timetable_slots_faculty_id", table_name="timetable_slots")
    op.drop_index("ix_timetable_slots_timetable_id", table_name="timetable_slots")
    op.drop_table("timetable_slots")
    op.drop_table("batches")
    op.drop_table("slot_types")
    op.drop_index("ix_timetable_groups_group_id", table_name="timetable_groups")
    op.drop_index("ix_timetable_groups_timetable_id", table_name="timetable_groups")
    op.drop_table("timetable_groups")
    op.drop_table("timetables")
    day_of_week_enum.drop(op.get_bind(), checkfirst=True)
