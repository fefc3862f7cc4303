"""Initial schema: accounts, users, video_posts.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("subject", sa.String(64), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_accounts_subject", "accounts", ["subject"], unique=True)
    op.create_index("ix_accounts_email", "accounts", ["email"], unique=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("user_name", sa.String(150), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("profile_photo", sa.Text(), nullable=True),
        sa.Column("videos", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("collections", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("liked_videos", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_user_id", "users", ["user_id"], unique=True)
    op.create_index("ix_users_user_name", "users", ["user_name"], unique=True)

    op.create_table(
        "video_posts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("post_title", sa.String(255), nullable=False),
        sa.Column("video_url", sa.Text(), nullable=False),
        sa.Column("cover_image_url", sa.Text(), nullable=False),
        sa.Column("restaurant_name", sa.String(255), nullable=False),
        sa.Column("restaurant_address", sa.Text(), nullable=True),
        sa.Column("ordered_via", sa.String(255), nullable=True),
        sa.Column("post_time", sa.DateTime(), nullable=True),
        sa.Column("likes", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("count_like", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("comments", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("count_comment", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("count_collections", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_video_posts_user_id", "video_posts", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_video_posts_user_id", table_name="video_posts")
    op.drop_table("video_posts")
    op.drop_index("ix_users_user_name", table_name="users")
    op.drop_index("ix_users_user_id", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_accounts_email", table_name="accounts")
    op.drop_index("ix_accounts_subject", table_name="accounts")
    op.drop_table("accounts")
