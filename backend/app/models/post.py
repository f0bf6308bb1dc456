"""
Quill Backend — Post SQLAlchemy Model
======================================

What:  ORM model representing the `posts` table.
Why:   Maps Post records to rows for SQLAlchemyPostStore.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by SQLAlchemyPostStore and by Alembic for schema management.

Table Design Rationale:
    - UUID primary key: opaque, globally unique, assigned on insert
    - title/content/author: TEXT, no artificial length limit
    - created_at: UTC with timezone, assigned on insert, never updated,
      strictly increasing within one process

    Index on created_at DESC:
        The list endpoint always reads newest-first.
"""

import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import DateTime, Index, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


_last_created_at = datetime.min.replace(tzinfo=timezone.utc)


def next_created_at() -> datetime:
    """
    Current UTC time, strictly later than any value it returned before.

    Two posts created within one clock tick get distinct timestamps a
    microsecond apart, so newest-first listing follows creation order.
    """
    global _last_created_at
    now = datetime.now(timezone.utc)
    if now <= _last_created_at:
        now = _last_created_at + timedelta(microseconds=1)
    _last_created_at = now
    return now


class Post(Base):
    """
    A blog post row.

    Lifecycle:
        1. Inserted with a fresh UUID and created_at
        2. title/content/author may be rewritten any number of times
        3. Deleted with a hard DELETE (no tombstone)
    """

    __tablename__ = "posts"

    # ── Primary Key ───────────────────────────────────────────────────────
    # Generic Uuid type: native UUID on PostgreSQL, CHAR(32) on SQLite
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier assigned on insert",
    )

    # ── Content ───────────────────────────────────────────────────────────
    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Post headline",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Post body",
    )

    author: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
        comment="Display name of the writer; empty when not given",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    # Set by the application on insert so both engines share one clock source
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=next_created_at,
        comment="When this post was created (UTC)",
    )

    __table_args__ = (
        Index("idx_posts_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title[:30]}', created_at='{self.created_at}')>"
