"""
ChoreoNotes Backend — Move SQLAlchemy Model
============================================

What:  ORM model for the `moves` table: a named technique owned by one user.
Who:   Managed by MoveCatalog; joined by RoutineComposition.

Table Design Rationale:
    - user_id: FK → users ON DELETE CASCADE
    - difficulty_level: database enum `difficulty_level`
      (beginner / intermediate / advanced), nullable
    - video_url: only a URL string; the request schema restricts hosts
    - Deleting a move cascades to every routine_moves row referencing it

Query Patterns:
    - List a user's moves: WHERE user_id = :uid [AND name ILIKE :q]
      [AND difficulty_level = :d] ORDER BY created_at DESC
      → idx_moves_user_id, idx_moves_created_at
    - Get by id: primary key lookup
"""

import enum
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from choreonotes.database import Base


class Difficulty(str, enum.Enum):
    """Fixed difficulty scale for moves."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


# Shared by the model and the Alembic migration so the type name stays in sync
difficulty_enum = Enum(
    Difficulty,
    name="difficulty_level",
    values_callable=lambda members: [m.value for m in members],
)


class Move(Base):
    __tablename__ = "moves"

    # Columns a partial update may touch (see services.patch.build_update)
    PATCHABLE = frozenset({"name", "description", "video_url", "difficulty_level"})

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owner of this move",
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    video_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
        comment="YouTube or Vimeo link",
    )

    difficulty_level: Mapped[Optional[Difficulty]] = mapped_column(
        difficulty_enum,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_moves_user_id", "user_id"),
        Index("idx_moves_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Move(id={self.id}, user_id={self.user_id}, name='{self.name}')>"
