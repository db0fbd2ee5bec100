"""create club, attendance, finance and match tables

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-01-05
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=100), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="Player"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("session_time", sa.Time(), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_sessions_session_date", "sessions", ["session_date"])

    op.create_table(
        "attendance",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.Integer(), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True),
        sa.Column("guest_name", sa.String(length=100), nullable=True),
        sa.Column("is_guest", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("checked_in_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("check_in_time", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("session_id", "user_id", name="uq_attendance_session_user"),
    )
    op.create_index("ix_attendance_session_id", "attendance", ["session_id"])
    op.create_index("ix_attendance_user_id", "attendance", ["user_id"])
    op.create_index("ix_attendance_guest_name", "attendance", ["guest_name"])

    op.create_table(
        "donations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("contributor_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("contributor_name", sa.String(length=100), nullable=True),
        sa.Column("is_guest", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("donated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_donations_contributor_id", "donations", ["contributor_id"])
    op.create_index("ix_donations_donated_at", "donations", ["donated_at"])

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("recorded_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("recorded_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_expenses_recorded_at", "expenses", ["recorded_at"])

    op.create_table(
        "finance_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("player_monthly_rate", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("player_monthly_year", sa.Integer(), nullable=True),
        sa.Column("player_monthly_month", sa.Integer(), nullable=True),
        sa.Column("guest_daily_rate", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.execute("INSERT INTO finance_settings (id, player_monthly_rate, guest_daily_rate) VALUES (1, 0, 0)")

    op.create_table(
        "matches",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.Integer(), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("match_number", sa.Integer(), nullable=False),
        sa.Column("match_type", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Pending"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("session_id", "match_number", name="uq_matches_session_number"),
    )
    op.create_index("ix_matches_session_id", "matches", ["session_id"])

    op.create_table(
        "match_results",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "match_id",
            sa.Integer(),
            sa.ForeignKey("matches.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("team_a_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("team_b_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("winner", sa.String(length=20), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "match_players",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("match_id", sa.Integer(), sa.ForeignKey("matches.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True),
        sa.Column("guest_name", sa.String(length=100), nullable=True),
        sa.Column("is_guest", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("team", sa.String(length=10), nullable=False),
        sa.UniqueConstraint("match_id", "user_id", name="uq_match_players_user"),
        sa.UniqueConstraint("match_id", "guest_name", name="uq_match_players_guest"),
    )
    op.create_index("ix_match_players_match_id", "match_players", ["match_id"])


def downgrade() -> None:
    op.drop_index("ix_match_players_match_id", table_name="match_players")
    op.drop_table("match_players")
    op.drop_table("match_results")
    op.drop_index("ix_matches_session_id", table_name="matches")
    op.drop_table("matches")
    op.drop_table("finance_settings")
    op.drop_index("ix_expenses_recorded_at", table_name="expenses")
    op.drop_table("expenses")
    op.drop_index("ix_donations_donated_at", table_name="donations")
    op.drop_index("ix_donations_contributor_id", table_name="donations")
    op.drop_table("donations")
    op.drop_index("ix_attendance_guest_name", table_name="attendance")
    op.drop_index("ix_attendance_user_id", table_name="attendance")
    op.drop_index("ix_attendance_session_id", table_name="attendance")
    op.drop_table("attendance")
    op.drop_index("ix_sessions_session_date", table_name="sessions")
    op.drop_table("sessions")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
