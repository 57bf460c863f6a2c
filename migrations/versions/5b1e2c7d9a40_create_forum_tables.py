"""create forum tables

Revision ID: 5b1e2c7d9a40
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5b1e2c7d9a40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create posts and comments."""
    op.create_table(
        "forum_post",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False),
        sa.Column("likes_count", sa.Integer(), nullable=False),
        sa.Column("comments_count", sa.Integer(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("likes_count >= 0", name="ck_forum_post_likes_nonneg"),
        sa.CheckConstraint("comments_count >= 0", name="ck_forum_post_comments_nonneg"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_forum_post_created_at", "forum_post", ["created_at"])
    op.create_index("ix_forum_post_user_id", "forum_post", ["user_id"])

    op.create_table(
        "forum_comment",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("post_id", sa.String(length=36), nullable=False),
        sa.Column("parent_id", sa.String(length=36), nullable=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False),
        sa.Column("likes_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["forum_post.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["parent_id"], ["forum_comment.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_forum_comment_post_id", "forum_comment", ["post_id"])


def downgrade() -> None:
    """Drop posts and comments."""
    op.drop_index("ix_forum_comment_post_id", table_name="forum_comment")
    op.drop_table("forum_comment")
    op.drop_index("ix_forum_post_user_id", table_name="forum_post")
    op.drop_index("ix_forum_post_created_at", table_name="forum_post")
    op.drop_table("forum_post")
