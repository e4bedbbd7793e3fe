from __future__ import annotations
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import BigInteger, Integer, String, Text, DateTime, Index, func
from modgate.db import Base

PENDING = "pending"

# NOT NULL columns the caller must supply
REQUIRED_COLUMNS = ("user_id", "server", "car", "price", "photo_reference")


class Submission(Base):
    __tablename__ = "submissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Telegram user ids exceed 32 bits
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    user_name: Mapped[str | None] = mapped_column(Text(), nullable=True)

    server: Mapped[str] = mapped_column(Text(), nullable=False)
    car: Mapped[str] = mapped_column(Text(), nullable=False)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)

    # Telegram file_id; stable, re-resolved on every photo fetch
    photo_reference: Mapped[str] = mapped_column(Text(), nullable=False)
    # legacy: a path resolved once at intake, expires upstream
    file_path_hint: Mapped[str | None] = mapped_column(Text(), nullable=True)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default=PENDING, server_default=PENDING)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_submissions_status_created_at", "status", "created_at"),
        # sqlite only: never reuse the id of a deleted newest row
        {"sqlite_autoincrement": True},
    )
