"""Pydantic models for generated flashcards.

These validate the parsed model output before anything is persisted; the
database rows live under app.core.db.schemas.flashcards.
"""

from pydantic import BaseModel, Field

from app.modules.generation.models import NonBlankText


class Flashcard(BaseModel):
    """Simple question/answer flashcard."""

    question: NonBlankText
    answer: NonBlankText


class FlashcardGeneration(BaseModel):
    """The ``{"flashcards": [...]}`` payload a model returns."""

    flashcards: list[Flashcard] = Field(min_length=1)
