"""
SQLAlchemy ORM models for the studio assistant.

Column names match the remote ``projects`` table exactly, including the
camelCase ``presetId`` and ``mixFileName`` columns.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class ProjectRecord(Base):
    """One saved chat session.

    ``tone`` holds JSON text; ``aggression``/``tightness``/``brightness``
    are denormalized copies of its fields for querying.
    """

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    messages: Mapped[list | None] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=True
    )
    mode: Mapped[str | None] = mapped_column(String(32), nullable=True)
    preset_id: Mapped[str | None] = mapped_column("presetId", String(64), nullable=True)
    tone: Mapped[str | None] = mapped_column(Text, nullable=True)
    brightness: Mapped[str | None] = mapped_column(String(16), nullable=True)
    aggression: Mapped[str | None] = mapped_column(String(16), nullable=True)
    tightness: Mapped[str | None] = mapped_column(String(16), nullable=True)
    mix_file_name: Mapped[str | None] = mapped_column("mixFileName", Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (Index("idx_projects_created_at", "created_at"),)
