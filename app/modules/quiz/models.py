"""Pydantic models for generated multiple-choice quizzes.

Field names follow the JSON contract given to the model (``possibleAnswers``,
``correctAnswer``); Python code uses the snake_case attributes.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.modules.generation.models import NonBlankText


class QuizQuestion(BaseModel):
    """A single multiple-choice question; the answer is kept by value."""

    model_config = ConfigDict(populate_by_name=True)

    question: NonBlankText
    possible_answers: list[NonBlankText] = Field(alias="possibleAnswers")
    correct_answer: NonBlankText = Field(alias="correctAnswer")


class QuizGeneration(BaseModel):
    """The ``{"questions": [...]}`` payload a model returns."""

    questions: list[QuizQuestion] = Field(min_length=1)
