"""Initial FitLog schema: users, questionnaires, catalogs, food/workout logs.

Revision ID: 3f9c1a7e2b10
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa

revision = "3f9c1a7e2b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False, unique=True, index=True),
        sa.Column("password_hash", sa.String(256), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("first_name", sa.String(100)),
        sa.Column("last_name", sa.String(100)),
        sa.Column("age", sa.Integer),
        sa.Column("weight_kg", sa.Float),
        sa.Column("height_cm", sa.Float),
        sa.Column("gender", sa.String(20)),
        sa.Column("date_of_birth", sa.Date),
        sa.Column("created_at", sa.DateTime),
        sa.Column("last_active_at", sa.DateTime),
    )
    op.create_table(
        "questionnaires",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"),
                  nullable=False, unique=True, index=True),
        sa.Column("goals", sa.String(500), nullable=False),
        sa.Column("fitness_level", sa.String(50), nullable=False),
        sa.Column("diet_preference", sa.String(100), nullable=False),
        sa.Column("equipment", sa.String(300), nullable=False),
        sa.Column("minutes_per_day", sa.Integer, nullable=False),
        sa.Column("updated_at", sa.DateTime),
    )
    op.create_table(
        "foods",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(300), nullable=False),
        sa.Column("name_key", sa.String(300), nullable=False, unique=True, index=True),
        sa.Column("calories", sa.Float, nullable=False, server_default="0"),
        sa.Column("protein", sa.Float, nullable=False, server_default="0"),
        sa.Column("carbs", sa.Float, nullable=False, server_default="0"),
        sa.Column("fat", sa.Float, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_table(
        "workouts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(300), nullable=False),
        sa.Column("name_key", sa.String(300), nullable=False, unique=True, index=True),
        sa.Column("body_part", sa.String(50)),
        sa.Column("equipment", sa.String(50), nullable=False, server_default="None"),
        sa.Column("difficulty", sa.String(20), nullable=False, server_default="Medium"),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_table(
        "food_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("food_id", sa.String(36), sa.ForeignKey("foods.id", ondelete="CASCADE"), nullable=False),
        sa.Column("calorie_goal", sa.Float, nullable=False, server_default="0"),
        sa.Column("total_weight_lost", sa.Float, nullable=False, server_default="0"),
        sa.Column("log_date", sa.Date, nullable=False),
        sa.Column("completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_food_logs_user_date", "food_logs", ["user_id", "log_date"])
    op.create_table(
        "workout_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("workout_id", sa.String(36), sa.ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("workout_streak", sa.Integer, nullable=False, server_default="0"),
        sa.Column("calories_burned", sa.Float, nullable=False, server_default="0"),
        sa.Column("heart_rate", sa.Integer, nullable=False, server_default="0"),
        sa.Column("log_date", sa.Date, nullable=False),
        sa.Column("completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_workout_logs_user_date", "workout_logs", ["user_id", "log_date"])


def downgrade() -> None:
    op.drop_index("ix_workout_logs_user_date", table_name="workout_logs")
    op.drop_table("workout_logs")
    op.drop_index("ix_food_logs_user_date", table_name="food_logs")
    op.drop_table("food_logs")
    op.drop_table("workouts")
    op.drop_table("foods")
    op.drop_table("questionnaires")
    op.drop_table("users")
