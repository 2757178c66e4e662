"""Instruction text sent to the model for each content kind."""

from __future__ import annotations

from typing import Iterable

from app.modules.chat.models.chat import ChatRole, ChatTurn
from app.modules.generation.models import ContentKind, GenerationRequest


NO_WRAPPER_RULE = (
    "Do not include any Markdown formatting or code block indicators in your "
    "response; output only the JSON object."
)


def _flashcards_prompt(req: GenerationRequest) -> str:
    return (
        "You are a flashcard set generation AI. "
        f"Create a flashcard set of {req.count} cards of {req.difficulty.value} "
        f'difficulty based on this source: "{req.source}". '
        "If the source has insufficient data, use your own information to create "
        "the flashcards. "
        'Format the output as a JSON object with a "flashcards" array containing '
        'objects with "question" and "answer" fields, both plain text. '
        + NO_WRAPPER_RULE
    )


def _quiz_prompt(req: GenerationRequest, choice_count: int) -> str:
    return (
        "You are a quiz generation AI. "
        f"Create a quiz of {req.count} questions of {req.difficulty.value} "
        f'difficulty based on this source: "{req.source}". '
        f"There should be {choice_count} possible answer choices for each question. "
        "Make sure the correct answer isn't the same number for each question. "
        "If the source has insufficient data, use your own information to create "
        "the quiz. "
        'Format the output as a JSON object with a "questions" array containing '
        'objects with "question", "possibleAnswers" (an array of '
        f'{choice_count} strings), and "correctAnswer" (a string exactly matching '
        "one of the possibleAnswers) fields. " + NO_WRAPPER_RULE
    )


def build_prompt(req: GenerationRequest, *, choice_count: int) -> str:
    """Build the single-shot instruction for an admitted request."""
    if req.kind == ContentKind.FLASHCARD_SET:
        return _flashcards_prompt(req)
    if req.kind == ContentKind.QUIZ:
        return _quiz_prompt(req, choice_count)
    raise ValueError(f"No single-shot prompt for kind {req.kind.value!r}")


TUTOR_ACK = (
    "Understood. I am a tutoring AI based on the specified data source. I will "
    "respond to questions related to that source and refuse to answer unrelated "
    "questions. How may I assist you today?"
)


def build_tutor_history(source: str, turns: Iterable[ChatTurn] = ()) -> list[ChatTurn]:
    """Preamble binding the model to the tutor's source, then prior turns."""
    preamble = [
        ChatTurn(
            role=ChatRole.USER,
            content=(
                f"You are a tutoring AI based on this data source: {source}. "
                "Respond to the user's questions appropriately based on the data "
                "source. Refuse to answer any questions unrelated to the data source."
            ),
        ),
        ChatTurn(role=ChatRole.ASSISTANT, content=TUTOR_ACK),
    ]
    return preamble + list(turns)
