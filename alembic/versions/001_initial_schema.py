"""Initial schema

Revision ID: 001
Revises: None
Create Date: 2024-06-01 00:00:00.000000+00:00

What:  Creates every table of the CMS: users, content, fitness records,
       gallery and media, inbox, settings, bulletins and the activity log.
How:   Portable column types only, so the same revision runs on SQLite and
       PostgreSQL. Default data is seeded by SchemaManager, not here.

Rollback: downgrade() drops all tables (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NOW = sa.text("CURRENT_TIMESTAMP")


def _id() -> sa.Column:
    return sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=NOW)


def _text(name: str, length: int = None) -> sa.Column:
    type_ = sa.String(length) if length else sa.Text()
    return sa.Column(name, type_, nullable=False, server_default=sa.text("''"))


def _flag(name: str, default: bool) -> sa.Column:
    return sa.Column(
        name, sa.Boolean(), nullable=False, server_default=sa.true() if default else sa.false()
    )


def _sort_order() -> sa.Column:
    return sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0"))


def upgrade() -> None:
    # ── Accounts ──────────────────────────────────────────────────────────
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(50), nullable=False, server_default=sa.text("'admin'")),
        _created_at(),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
    )

    # ── Content ───────────────────────────────────────────────────────────
    op.create_table(
        "pages",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False, unique=True),
        _text("content"),
        _text("meta_title", 255),
        _text("meta_description"),
        _text("meta_keywords"),
        _flag("is_published", False),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=NOW),
    )
    op.create_table(
        "blog_posts",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False, unique=True),
        _text("excerpt"),
        _text("content"),
        _text("featured_image", 500),
        _text("category", 100),
        _text("tags"),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'draft'")),
        sa.Column("publish_date", sa.DateTime(timezone=True), nullable=False, server_default=NOW),
        sa.Column(
            "author_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True
        ),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=NOW),
    )
    op.create_index("idx_blog_posts_publish_date", "blog_posts", ["publish_date"])

    # ── Fitness ───────────────────────────────────────────────────────────
    op.create_table(
        "trainers",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        _text("specialty", 255),
        _text("bio"),
        _text("photo", 500),
        _text("email", 255),
        _text("phone", 50),
        _text("social_facebook", 500),
        _text("social_instagram", 500),
        _text("social_twitter", 500),
        _text("certifications"),
        _flag("is_active", True),
        _sort_order(),
        _created_at(),
    )
    op.create_table(
        "classes",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        _text("description"),
        _text("short_description", 500),
        _text("image", 500),
        sa.Column("trainer_id", sa.Integer(), nullable=True),
        _text("schedule"),
        sa.Column("duration", sa.Integer(), nullable=False, server_default=sa.text("60")),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default=sa.text("20")),
        sa.Column("price", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "difficulty", sa.String(50), nullable=False, server_default=sa.text("'intermediate'")
        ),
        _flag("is_active", True),
        _sort_order(),
        _created_at(),
    )
    op.create_index("ix_classes_trainer_id", "classes", ["trainer_id"])
    op.create_table(
        "membership_plans",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("billing_period", sa.String(20), nullable=False, server_default=sa.text("'month'")),
        _text("description"),
        sa.Column("features", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        _flag("is_featured", False),
        _flag("is_active", True),
        _sort_order(),
        _created_at(),
    )
    op.create_table(
        "testimonials",
        _id(),
        sa.Column("client_name", sa.String(255), nullable=False),
        _text("client_photo", 500),
        _text("client_title", 255),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False, server_default=sa.text("5")),
        _flag("is_approved", False),
        _sort_order(),
        _created_at(),
    )

    # ── Gallery & media ───────────────────────────────────────────────────
    op.create_table(
        "gallery_albums",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        _text("description"),
        _text("cover_image", 500),
        _flag("is_active", True),
        _sort_order(),
        _created_at(),
    )
    op.create_table(
        "gallery_images",
        _id(),
        sa.Column(
            "album_id",
            sa.Integer(),
            sa.ForeignKey("gallery_albums.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("file_path", sa.String(500), nullable=False),
        _text("thumbnail_path", 500),
        _text("caption"),
        _sort_order(),
        _created_at(),
    )
    op.create_index("ix_gallery_images_album_id", "gallery_images", ["album_id"])
    op.create_table(
        "media",
        _id(),
        sa.Column("filename", sa.String(255), nullable=False, unique=True),
        sa.Column("original_name", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(500), nullable=False),
        _text("file_type", 100),
        sa.Column("file_size", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        _text("alt_text"),
        _created_at(),
    )

    # ── Inbox ─────────────────────────────────────────────────────────────
    op.create_table(
        "contact_submissions",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        _text("phone", 50),
        _text("subject", 255),
        sa.Column("message", sa.Text(), nullable=False),
        _flag("is_read", False),
        _created_at(),
    )
    op.create_table(
        "membership_inquiries",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        _text("phone", 50),
        sa.Column(
            "plan_id",
            sa.Integer(),
            sa.ForeignKey("membership_plans.id", ondelete="SET NULL"),
            nullable=True,
        ),
        _text("message"),
        sa.Column("status", sa.String(50), nullable=False, server_default=sa.text("'new'")),
        _created_at(),
    )

    # ── Site ──────────────────────────────────────────────────────────────
    op.create_table(
        "settings",
        _id(),
        sa.Column("key", sa.String(100), nullable=False, unique=True),
        _text("value"),
        sa.Column("type", sa.String(20), nullable=False, server_default=sa.text("'string'")),
    )
    op.create_table(
        "bulletins",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("priority", sa.String(20), nullable=False, server_default=sa.text("'normal'")),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        _flag("is_active", True),
        _created_at(),
    )
    op.create_table(
        "activity_logs",
        _id(),
        sa.Column(
            "user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("entity_type", sa.String(50), nullable=True),
        sa.Column("entity_id", sa.Integer(), nullable=True),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        _created_at(),
    )
    op.create_index("idx_activity_logs_created_at", "activity_logs", ["created_at"])


def downgrade() -> None:
    op.drop_index("idx_activity_logs_created_at", table_name="activity_logs")
    op.drop_table("activity_logs")
    op.drop_table("bulletins")
    op.drop_table("settings")
    op.drop_table("membership_inquiries")
    op.drop_table("contact_submissions")
    op.drop_table("media")
    op.drop_index("ix_gallery_images_album_id", table_name="gallery_images")
    op.drop_table("gallery_images")
    op.drop_table("gallery_albums")
    op.drop_table("testimonials")
    op.drop_table("membership_plans")
    op.drop_index("ix_classes_trainer_id", table_name="classes")
    op.drop_table("classes")
    op.drop_table("trainers")
    op.drop_index("idx_blog_posts_publish_date", table_name="blog_posts")
    op.drop_table("blog_posts")
    op.drop_table("pages")
    op.drop_table("users")
