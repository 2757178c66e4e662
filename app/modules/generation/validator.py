"""Check a parsed envelope against the shape expected for its content kind.

Validation is all-or-nothing: the first invalid element rejects the batch,
so a half-valid generated set never reaches the database.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import ValidationError as PydanticValidationError

from app.core.logging import get_logger
from app.modules.flashcards.models.flashcards import FlashcardGeneration
from app.modules.generation.errors import ValidationFailed
from app.modules.generation.models import ContentKind
from app.modules.quiz.models import QuizGeneration

logger = get_logger(__name__)

ValidatedContent = Union[FlashcardGeneration, QuizGeneration]

_MODELS: dict[ContentKind, type[ValidatedContent]] = {
    ContentKind.FLASHCARD_SET: FlashcardGeneration,
    ContentKind.QUIZ: QuizGeneration,
}


def _loc(parts: tuple[Any, ...]) -> str:
    return ".".join(str(p) for p in parts)


def _check_choices(quiz: QuizGeneration, choice_count: int) -> None:
    for i, q in enumerate(quiz.questions):
        if len(q.possible_answers) != choice_count:
            raise ValidationFailed(
                f"Question {i} has {len(q.possible_answers)} possible answers, "
                f"expected {choice_count}",
                location=f"questions.{i}.possibleAnswers",
            )
        if q.correct_answer not in q.possible_answers:
            raise ValidationFailed(
                f"Question {i} correctAnswer is not one of its possibleAnswers",
                location=f"questions.{i}.correctAnswer",
            )


def validate(
    envelope: dict[str, Any], kind: ContentKind, *, choice_count: int
) -> ValidatedContent:
    model = _MODELS.get(kind)
    if model is None:
        raise ValueError(f"Kind {kind.value!r} has no structured content")

    try:
        content = model.model_validate(envelope)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = _loc(first.get("loc", ()))
        logger.warning(
            "Rejected generated content at %s: %s",
            location,
            first.get("msg"),
            extra={"kind": kind.value},
        )
        raise ValidationFailed(
            f"Invalid {kind.value} structure at {location or 'root'}: {first.get('msg')}",
            location=location,
        ) from e

    if isinstance(content, QuizGeneration):
        _check_choices(content, choice_count)
    return content
