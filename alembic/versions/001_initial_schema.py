"""Initial schema: administrators, voters, sessions, ballot, votes, election config.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "admin_users",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("role IN ('chairman', 'secretary', 'committee')", name="ck_admin_users_role"),
    )
    op.create_index("ix_admin_users_username", "admin_users", ["username"], unique=True)
    op.create_index("ix_admin_users_email", "admin_users", ["email"], unique=True)

    op.create_table(
        "voters",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("avatar", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("has_voted", sa.Boolean, nullable=False, server_default="0"),
        sa.Column("voted_positions", sa.JSON, nullable=False),
    )

    op.create_table(
        "voter_sessions",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("voter_id", sa.String(32), sa.ForeignKey("voters.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_voter_sessions_voter_id", "voter_sessions", ["voter_id"])

    op.create_table(
        "positions",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_positions_order", "positions", ["order"])

    op.create_table(
        "candidates",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("position_id", sa.Uuid, sa.ForeignKey("positions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_candidates_position_id", "candidates", ["position_id"])

    # position_id and candidate_id are not foreign keys
    op.create_table(
        "votes",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("voter_id", sa.String(32), nullable=False),
        sa.Column("position_id", sa.String(36), nullable=False),
        sa.Column("candidate_id", sa.String(36), nullable=False),
        sa.Column("candidate_name", sa.String(200), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("voter_id", "position_id", name="uq_votes_voter_position"),
    )
    op.create_index("idx_votes_position_id", "votes", ["position_id"])
    op.create_index("idx_votes_candidate_id", "votes", ["candidate_id"])

    op.create_table(
        "election_config",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="0"),
        sa.Column("allow_late_voting", sa.Boolean, nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("start_time < end_time", name="ck_election_config_window"),
        sa.CheckConstraint("id = 1", name="ck_election_config_singleton"),
    )


def downgrade() -> None:
    op.drop_table("election_config")
    op.drop_index("idx_votes_candidate_id", table_name="votes")
    op.drop_index("idx_votes_position_id", table_name="votes")
    op.drop_table("votes")
    op.drop_index("idx_candidates_position_id", table_name="candidates")
    op.drop_table("candidates")
    op.drop_index("idx_positions_order", table_name="positions")
    op.drop_table("positions")
    op.drop_index("idx_voter_sessions_voter_id", table_name="voter_sessions")
    op.drop_table("voter_sessions")
    op.drop_table("voters")
    op.drop_index("ix_admin_users_email", table_name="admin_users")
    op.drop_index("ix_admin_users_username", table_name="admin_users")
    op.drop_table("admin_users")
