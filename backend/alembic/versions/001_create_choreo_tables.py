"""Create users, moves, routines and routine_moves

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial ChoreoNotes schema.
How:   PostgreSQL enum `difficulty_level`, four tables with cascading foreign
       keys, per-user unique routine names, and the list/order indexes.

Rollback: downgrade() drops everything (destructive, all data lost).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

difficulty_level = sa.Enum(
    "beginner", "intermediate", "advanced", name="difficulty_level"
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "email",
            sa.String(255),
            nullable=False,
            comment="Login identifier, unique and case-sensitive",
        ),
        sa.Column(
            "password_hash", sa.String(255), nullable=False, comment="bcrypt hash of the password"
        ),
        sa.Column("username", sa.String(50), nullable=False, comment="Display name"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "moves",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False, comment="Owner of this move"),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("video_url", sa.String(500), nullable=True, comment="YouTube or Vimeo link"),
        sa.Column("difficulty_level", difficulty_level, nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_moves_user_id", "moves", ["user_id"])
    op.create_index("idx_moves_created_at", "moves", [sa.text("created_at DESC")])

    op.create_table(
        "routines",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "duration_minutes",
            sa.Integer(),
            nullable=True,
            comment="Number of composition entries (one minute per move)",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "name", name="uq_routines_user_id_name"),
    )
    op.create_index("idx_routines_user_id", "routines", ["user_id"])

    op.create_table(
        "routine_moves",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("routine_id", sa.Integer(), nullable=False),
        sa.Column("move_id", sa.Integer(), nullable=False),
        sa.Column("order_index", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["routine_id"], ["routines.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["move_id"], ["moves.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "idx_routine_moves_routine_order", "routine_moves", ["routine_id", "order_index"]
    )
    op.create_index("idx_routine_moves_move_id", "routine_moves", ["move_id"])


def downgrade() -> None:
    op.drop_index("idx_routine_moves_move_id", table_name="routine_moves")
    op.drop_index("idx_routine_moves_routine_order", table_name="routine_moves")
    op.drop_table("routine_moves")
    op.drop_index("idx_routines_user_id", table_name="routines")
    op.drop_table("routines")
    op.drop_index("idx_moves_created_at", table_name="moves")
    op.drop_index("idx_moves_user_id", table_name="moves")
    op.drop_table("moves")
    op.drop_table("users")
    difficulty_level.drop(op.get_bind(), checkfirst=True)
