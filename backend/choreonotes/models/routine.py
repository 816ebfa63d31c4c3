"""
ChoreoNotes Backend — Routine and Composition SQLAlchemy Models
================================================================

What:  ORM models for `routines` and the `routine_moves` join table.
Who:   RoutineCatalog owns routines; RoutineComposition owns routine_moves.

Table Design Rationale:
    routines
    - UNIQUE(user_id, name): two users may share a routine name, one user may not
    - duration_minutes: aggregate maintained by RoutineComposition
      (one minute per composition entry), nullable until the first recompute

    routine_moves
    - Surrogate id; (routine_id, move_id) is deliberately NOT unique, so the
      same move may appear more than once in a routine
    - order_index: ascending order defines playback; gaps and ties are allowed
    - Both FKs cascade, so deleting a routine or a move removes its entries
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from choreonotes.database import Base


class Routine(Base):
    __tablename__ = "routines"

    PATCHABLE = frozenset({"name", "description"})

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    duration_minutes: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Number of composition entries (one minute per move)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_routines_user_id_name"),
        Index("idx_routines_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Routine(id={self.id}, user_id={self.user_id}, name='{self.name}', "
            f"duration_minutes={self.duration_minutes})>"
        )


class RoutineMove(Base):
    """A composition entry: one move at one position inside one routine."""

    __tablename__ = "routine_moves"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    routine_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("routines.id", ondelete="CASCADE"),
        nullable=False,
    )

    move_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("moves.id", ondelete="CASCADE"),
        nullable=False,
    )

    order_index: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    __table_args__ = (
        Index("idx_routine_moves_routine_order", "routine_id", "order_index"),
        Index("idx_routine_moves_move_id", "move_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<RoutineMove(routine_id={self.routine_id}, move_id={self.move_id}, "
            f"order_index={self.order_index})>"
        )
