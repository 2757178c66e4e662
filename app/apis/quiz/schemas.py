from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.core.db.schemas.quiz import Quiz as DBQuiz


class QuizQuestionRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    question: str
    possible_answers: list[str] = Field(alias="possibleAnswers")
    correct_answer: str = Field(alias="correctAnswer")
    order_index: int


class QuizSummary(BaseModel):
    id: int
    title: str
    description: str
    difficulty: str
    created_at: str


class QuizRead(QuizSummary):
    questions: list[QuizQuestionRead] = Field(default_factory=list)


class GeneratedQuiz(QuizRead):
    usage_recorded: bool = True


def summarize_quiz(q: DBQuiz) -> QuizSummary:
    return QuizSummary(
        id=q.id,
        title=q.title,
        description=q.description,
        difficulty=q.difficulty,
        created_at=q.created_at.isoformat(),
    )


def read_quiz(q: DBQuiz) -> QuizRead:
    return QuizRead(
        **summarize_quiz(q).model_dump(),
        questions=[
            QuizQuestionRead(
                id=row.id,
                question=row.question,
                possible_answers=list(row.possible_answers or []),
                correct_answer=row.correct_answer,
                order_index=row.order_index,
            )
            for row in (q.questions or [])
        ],
    )
