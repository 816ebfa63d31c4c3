"""
ChoreoNotes Backend — User SQLAlchemy Model
============================================

What:  ORM model for the `users` table (identity records).
Who:   Written by UserDirectory at registration; read by CredentialService and
       the auth dependency.

Table Design Rationale:
    - email: UNIQUE, compared case-sensitively (exact match)
    - password_hash: bcrypt output only; plaintext is never stored
    - username: display name shown by the frontend
    - Rows are never updated or deleted by the API
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from choreonotes.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Login identifier, unique and case-sensitive",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash of the password",
    )

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Display name",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
