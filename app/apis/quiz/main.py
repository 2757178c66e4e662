from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db.base import get_session
from app.core.db.schemas.auth import User
from app.core.db_services import ContentQueryService
from app.apis.deps import current_user, get_pipeline
from app.apis.schemas import ErrorResponse, GenerateContentRequest
from app.modules.generation.models import ContentKind
from app.modules.generation.pipeline import GenerationPipeline
from .schemas import GeneratedQuiz, QuizRead, QuizSummary, read_quiz, summarize_quiz


router = APIRouter()

CurrentUser = Annotated[User, Depends(current_user)]


@router.post(
    f"/{settings.app.version}/quizzes",
    response_model=GeneratedQuiz,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
    tags=["quiz"],
)
async def generate_quiz(
    req: GenerateContentRequest,
    user: CurrentUser,
    pipeline: GenerationPipeline = Depends(get_pipeline),
) -> GeneratedQuiz:
    persisted = await pipeline.run(user.id, req.to_generation_request(ContentKind.QUIZ))
    return GeneratedQuiz(
        **read_quiz(persisted.entity).model_dump(),
        usage_recorded=persisted.usage_recorded,
    )


@router.get(
    f"/{settings.app.version}/quizzes",
    response_model=list[QuizSummary],
    tags=["quiz"],
)
async def list_quizzes(
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> list[QuizSummary]:
    quizzes = await ContentQueryService(session).list_quizzes(user.id)
    return [summarize_quiz(q) for q in quizzes]


@router.get(
    f"/{settings.app.version}/quizzes/{{quiz_id:int}}",
    response_model=QuizRead,
    response_model_by_alias=True,
    tags=["quiz"],
)
async def get_quiz(
    quiz_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> QuizRead:
    q = await ContentQueryService(session).get_quiz(user.id, quiz_id)
    if not q:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return read_quiz(q)
