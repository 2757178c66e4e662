"""Randomize answer order so the correct choice has no predictable position."""

from __future__ import annotations

import random
from typing import MutableSequence, Optional, TypeVar

from app.modules.quiz.models import QuizGeneration

T = TypeVar("T")


def shuffle_answers(choices: MutableSequence[T], rng: random.Random) -> None:
    """In-place Fisher-Yates shuffle."""
    for j in range(len(choices) - 1, 0, -1):
        r = rng.randint(0, j)
        choices[j], choices[r] = choices[r], choices[j]


def shuffle_quiz(
    quiz: QuizGeneration, rng: Optional[random.Random] = None
) -> QuizGeneration:
    """Shuffle every question's choices independently.

    ``correct_answer`` is a value, so it stays valid whatever the new order.
    """
    rng = rng or random.Random()
    for q in quiz.questions:
        shuffle_answers(q.possible_answers, rng)
    return quiz
