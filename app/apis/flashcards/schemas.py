from __future__ import annotations

from pydantic import BaseModel, Field

from app.core.db.schemas.flashcards import FlashcardSet as DBSet


class FlashcardRead(BaseModel):
    id: int
    question: str
    answer: str
    order_index: int


class FlashcardSetSummary(BaseModel):
    id: int
    title: str
    description: str
    difficulty: str
    created_at: str


class FlashcardSetRead(FlashcardSetSummary):
    flashcards: list[FlashcardRead] = Field(default_factory=list)


class GeneratedFlashcardSet(FlashcardSetRead):
    usage_recorded: bool = True


def summarize_set(s: DBSet) -> FlashcardSetSummary:
    return FlashcardSetSummary(
        id=s.id,
        title=s.title,
        description=s.description,
        difficulty=s.difficulty,
        created_at=s.created_at.isoformat(),
    )


def read_set(s: DBSet) -> FlashcardSetRead:
    return FlashcardSetRead(
        **summarize_set(s).model_dump(),
        flashcards=[
            FlashcardRead(
                id=c.id, question=c.question, answer=c.answer, order_index=c.order_index
            )
            for c in (s.flashcards or [])
        ],
    )
