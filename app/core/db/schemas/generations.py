from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING
from sqlalchemy import DateTime, Enum, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum

from app.core.db.base import Base

if TYPE_CHECKING:
    from .auth import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class GenerationKind(enum.Enum):
    FLASHCARD_SET = "flashcard-set"
    QUIZ = "quiz"


class Generation(Base):
    """Append-only usage record; one row per successful generation."""

    __tablename__ = "generations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    kind: Mapped[GenerationKind] = mapped_column(
        Enum(GenerationKind, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    # Naive UTC, compared against the quota window.
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=_utcnow, index=True
    )

    user: Mapped["User"] = relationship("User", back_populates="generations")


__all__ = ["GenerationKind", "Generation"]
