"""add tracking and reminders

Revision ID: 8d2f4a6c1e73
Revises: 5b1e2c7d9a40
Create Date: 2026-10-19 15:40:02.118734

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8d2f4a6c1e73"
down_revision: Union[str, Sequence[str], None] = "5b1e2c7d9a40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create daily logs, health profiles, reminders and saved predictions."""
    op.create_table(
        "daily_log",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("log_date", sa.Date(), nullable=False),
        sa.Column("symptoms", sa.JSON(), nullable=False),
        sa.Column("mood", sa.String(length=32), nullable=True),
        sa.Column("energy_level", sa.String(length=32), nullable=True),
        sa.Column("stress_level", sa.Integer(), nullable=True),
        sa.Column("sleep_hours", sa.Float(), nullable=True),
        sa.Column("sleep_quality", sa.String(length=32), nullable=True),
        sa.Column("exercise_minutes", sa.Integer(), nullable=True),
        sa.Column("exercise_type", sa.String(length=64), nullable=True),
        sa.Column("flow_intensity", sa.String(length=32), nullable=True),
        sa.Column("water_intake_ml", sa.Integer(), nullable=True),
        sa.Column("weight_kg", sa.Float(), nullable=True),
        sa.Column("medications", sa.JSON(), nullable=False),
        sa.Column("supplements", sa.JSON(), nullable=False),
        sa.Column("cravings", sa.JSON(), nullable=False),
        sa.Column("food_log", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "stress_level IS NULL OR stress_level BETWEEN 1 AND 10",
            name="ck_daily_log_stress_range",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "log_date", name="uq_daily_log_user_date"),
    )
    op.create_index("ix_daily_log_user_id", "daily_log", ["user_id"])

    op.create_table(
        "health_profile",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("activity_level", sa.String(length=32), nullable=True),
        sa.Column("sleep_hours", sa.Integer(), nullable=True),
        sa.Column("stress_level", sa.Integer(), nullable=True),
        sa.Column("mood", sa.String(length=32), nullable=True),
        sa.Column("energy_level", sa.String(length=32), nullable=True),
        sa.Column("height_cm", sa.Float(), nullable=True),
        sa.Column("weight_kg", sa.Float(), nullable=True),
        sa.Column("blood_type", sa.String(length=8), nullable=True),
        sa.Column("allergies", sa.JSON(), nullable=False),
        sa.Column("medical_conditions", sa.JSON(), nullable=False),
        sa.Column("medications", sa.JSON(), nullable=False),
        sa.Column("health_goals", sa.JSON(), nullable=False),
        sa.Column("dietary_preferences", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "stress_level IS NULL OR stress_level BETWEEN 1 AND 10",
            name="ck_health_profile_stress_range",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "reminder",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("reminder_type", sa.String(length=32), nullable=False),
        sa.Column("reminder_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("frequency", sa.String(length=32), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_sent", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reminder_user_date", "reminder", ["user_id", "reminder_date"])

    op.create_table(
        "cycle_prediction",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("cycle_start_date", sa.Date(), nullable=False),
        sa.Column("cycle_length", sa.Integer(), nullable=False),
        sa.Column("predicted_period_start", sa.Date(), nullable=False),
        sa.Column("predicted_ovulation", sa.Date(), nullable=False),
        sa.Column("predicted_fertile_window_start", sa.Date(), nullable=False),
        sa.Column("predicted_fertile_window_end", sa.Date(), nullable=False),
        sa.Column("actual_period_start", sa.Date(), nullable=True),
        sa.Column("is_predicted", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cycle_prediction_user_id", "cycle_prediction", ["user_id"])


def downgrade() -> None:
    """Drop daily logs, health profiles, reminders and saved predictions."""
    op.drop_index("ix_cycle_prediction_user_id", table_name="cycle_prediction")
    op.drop_table("cycle_prediction")
    op.drop_index("ix_reminder_user_date", table_name="reminder")
    op.drop_table("reminder")
    op.drop_table("health_profile")
    op.drop_index("ix_daily_log_user_id", table_name="daily_log")
    op.drop_table("daily_log")
