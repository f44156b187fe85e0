# src/nedapay/models/user.py
"""SQLAlchemy model for wallet holders known to the user directory."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nedapay.db.session import Base
from nedapay.db.time import utcnow

STELLAR_PUBLIC_KEY_LENGTH = 56


class User(Base):
    """Wallet holder identified by phone number and bound to one Stellar account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    phone_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    stellar_public_key: Mapped[str] = mapped_column(
        String(STELLAR_PUBLIC_KEY_LENGTH),
        unique=True,
        nullable=False,
    )
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, phone_number={self.phone_number!r})"
