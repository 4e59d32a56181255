from datetime import datetime
from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Boolean, Column, DateTime, Enum as SAEnum, ForeignKey, Index, Integer, String, Table, Text, func,
)
from wellness_api.db import Base


class SessionStatus(str, Enum):
    draft = "draft"
    published = "published"


class Difficulty(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class Category(str, Enum):
    yoga = "yoga"
    meditation = "meditation"
    fitness = "fitness"
    wellness = "wellness"
    breathing = "breathing"
    stretching = "stretching"
    other = "other"


TAG_MAX = 64


# Composite primary key: a user likes a session at most once
session_likes = Table(
    "session_likes",
    Base.metadata,
    Column("session_id", ForeignKey("sessions.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class SessionTag(Base):
    __tablename__ = "session_tags"
    session_id: Mapped[int] = mapped_column(ForeignKey("sessions.id", ondelete="CASCADE"), primary_key=True)
    tag: Mapped[str] = mapped_column(String(TAG_MAX), primary_key=True, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class WellnessSession(Base):
    __tablename__ = "sessions"
    __table_args__ = (
        Index("ix_sessions_user_status", "user_id", "status"),
        Index("ix_sessions_status_created", "status", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    json_file_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    status: Mapped[SessionStatus] = mapped_column(
        SAEnum(SessionStatus, name="session_status"), nullable=False, default=SessionStatus.draft,
    )
    duration: Mapped[str] = mapped_column(String(50), nullable=False, default="30 min")
    difficulty: Mapped[Difficulty] = mapped_column(
        SAEnum(Difficulty, name="session_difficulty"), nullable=False, default=Difficulty.beginner,
    )
    category: Mapped[Category] = mapped_column(
        SAEnum(Category, name="session_category"), nullable=False, default=Category.wellness,
    )
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(),
    )

    user = relationship("User", back_populates="sessions")
    tag_rows = relationship(
        "SessionTag", order_by="SessionTag.position", cascade="all, delete-orphan", lazy="selectin",
    )
    likers = relationship("User", secondary=session_likes, lazy="selectin")

    @property
    def tags(self) -> list[str]:
        return [row.tag for row in self.tag_rows]

    @tags.setter
    def tags(self, values: list[str]) -> None:
        # Reuse rows for tags that survive so the flush never deletes and re-inserts the same key
        existing = {row.tag: row for row in self.tag_rows}
        rows = []
        for position, tag in enumerate(values):
            row = existing.get(tag) or SessionTag(tag=tag)
            row.position = position
            rows.append(row)
        self.tag_rows = rows

    @property
    def likes(self) -> list[int]:
        return [u.id for u in self.likers]

    @property
    def like_count(self) -> int:
        return len(self.likers)

    def is_owned_by(self, user_id: int) -> bool:
        return self.user_id == user_id
