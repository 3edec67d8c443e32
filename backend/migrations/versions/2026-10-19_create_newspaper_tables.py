"""Create users, articles, article_tags, publishers, payments tables

Revision ID: 5c1e2a7f9b30
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5c1e2a7f9b30"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


article_status = sa.Enum("pending", "approved", "declined", name="article_status")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("photo", sa.String(length=1024), nullable=True),
        sa.Column("role", sa.String(length=50), nullable=False, server_default="user"),
        sa.Column("premium_info", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_premium_info"), "users", ["premium_info"], unique=False)

    op.create_table(
        "articles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image", sa.String(length=1024), nullable=True),
        sa.Column("author_name", sa.String(length=100), nullable=True),
        sa.Column("author_email", sa.String(length=255), nullable=False),
        sa.Column("author_photo", sa.String(length=1024), nullable=True),
        sa.Column("publisher_value", sa.String(length=255), nullable=True),
        sa.Column("publisher_label", sa.String(length=255), nullable=True),
        sa.Column("status", article_status, nullable=False),
        sa.Column("decline_reason", sa.Text(), nullable=True),
        sa.Column("views", sa.Integer(), server_default="0", nullable=False),
        sa.Column("is_premium", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("is_exclusive", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("views >= 0", name="ck_articles_views_non_negative"),
        sa.CheckConstraint(
            "decline_reason IS NULL OR status = 'declined'",
            name="ck_articles_decline_reason_status",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_articles_id"), "articles", ["id"], unique=False)
    op.create_index(op.f("ix_articles_author_email"), "articles", ["author_email"], unique=False)
    op.create_index(op.f("ix_articles_publisher_value"), "articles", ["publisher_value"], unique=False)
    op.create_index(op.f("ix_articles_publisher_label"), "articles", ["publisher_label"], unique=False)
    op.create_index("ix_articles_status_created", "articles", ["status", "created_at"], unique=False)
    op.create_index("ix_articles_views", "articles", ["views"], unique=False)

    op.create_table(
        "article_tags",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("article_id", sa.Integer(), nullable=False),
        sa.Column("value", sa.String(length=100), nullable=False),
        sa.Column("label", sa.String(length=100), nullable=False),
        sa.ForeignKeyConstraint(["article_id"], ["articles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_article_tags_id"), "article_tags", ["id"], unique=False)
    op.create_index(op.f("ix_article_tags_article_id"), "article_tags", ["article_id"], unique=False)
    op.create_index("ix_article_tags_value", "article_tags", ["value"], unique=False)

    op.create_table(
        "publishers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("logo", sa.String(length=1024), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_publishers_id"), "publishers", ["id"], unique=False)
    op.create_index(op.f("ix_publishers_name"), "publishers", ["name"], unique=False)

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_payments_id"), "payments", ["id"], unique=False)
    op.create_index(op.f("ix_payments_email"), "payments", ["email"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_payments_email"), table_name="payments")
    op.drop_index(op.f("ix_payments_id"), table_name="payments")
    op.drop_table("payments")
    op.drop_index(op.f("ix_publishers_name"), table_name="publishers")
    op.drop_index(op.f("ix_publishers_id"), table_name="publishers")
    op.drop_table("publishers")
    op.drop_index("ix_article_tags_value", table_name="article_tags")
    op.drop_index(op.f("ix_article_tags_article_id"), table_name="article_tags")
    op.drop_index(op.f("ix_article_tags_id"), table_name="article_tags")
    op.drop_table("article_tags")
    op.drop_index("ix_articles_views", table_name="articles")
    op.drop_index("ix_articles_status_created", table_name="articles")
    op.drop_index(op.f("ix_articles_publisher_label"), table_name="articles")
    op.drop_index(op.f("ix_articles_publisher_value"), table_name="articles")
    op.drop_index(op.f("ix_articles_author_email"), table_name="articles")
    op.drop_index(op.f("ix_articles_id"), table_name="articles")
    op.drop_table("articles")
    article_status.drop(op.get_bind(), checkfirst=True)
    op.drop_index(op.f("ix_users_premium_info"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_table("users")
