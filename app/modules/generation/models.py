"""Request models shared by the generation pipeline and the API layer."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel

from app.modules.generation.errors import InvalidPayload


def _not_blank(value: str) -> str:
    # Checked, not stripped: answers are later compared by exact value.
    if not value.strip():
        raise ValueError("must be non-empty text")
    return value


NonBlankText = Annotated[str, AfterValidator(_not_blank)]


class ContentKind(str, Enum):
    FLASHCARD_SET = "flashcard-set"
    QUIZ = "quiz"
    CHAT = "chat"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class GenerationRequest(BaseModel):
    """A single-shot generation request as received from the client.

    Fields are optional here so that a missing value is reported through
    :meth:`admit` as ``InvalidPayload`` rather than a framework error.
    """

    kind: ContentKind
    source: Optional[str] = None
    count: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    difficulty: Optional[Difficulty] = None

    def admit(self, *, max_count: int) -> None:
        """Reject missing or out-of-range fields before any model call."""
        missing = [
            name
            for name in ("source", "title", "description")
            if not (getattr(self, name) or "").strip()
        ]
        if self.count is None:
            missing.append("num")
        if self.difficulty is None:
            missing.append("difficulty")
        if missing:
            raise InvalidPayload(f"Missing required fields: {', '.join(missing)}")
        if self.count < 1 or self.count > max_count:
            raise InvalidPayload(f"num must be between 1 and {max_count}")
