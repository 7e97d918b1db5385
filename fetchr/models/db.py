"""
SQLAlchemy ORM models for persistent storage.

Models mirror the dataclass models but add database persistence.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CommanderDB(Base):
    """
    A commander card scraped from Scryfall.

    One row per card name; re-imports update the row in place.
    """

    __tablename__ = "commanders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    has_partner: Mapped[bool] = mapped_column(Boolean, default=False)
    partners_with: Mapped[str | None] = mapped_column(String(255), nullable=True)
    color_identity: Mapped[str] = mapped_column(String(5), default="")
    cmc: Mapped[int] = mapped_column(Integer, default=0)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<CommanderDB(name={self.name}, colors={self.color_identity})>"
