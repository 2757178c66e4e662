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
from .schemas import (
    FlashcardSetRead,
    FlashcardSetSummary,
    GeneratedFlashcardSet,
    read_set,
    summarize_set,
)


router = APIRouter()

CurrentUser = Annotated[User, Depends(current_user)]


@router.post(
    f"/{settings.app.version}/flashcard-sets",
    response_model=GeneratedFlashcardSet,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
    tags=["flashcards"],
)
async def generate_flashcard_set(
    req: GenerateContentRequest,
    user: CurrentUser,
    pipeline: GenerationPipeline = Depends(get_pipeline),
) -> GeneratedFlashcardSet:
    persisted = await pipeline.run(
        user.id, req.to_generation_request(ContentKind.FLASHCARD_SET)
    )
    return GeneratedFlashcardSet(
        **read_set(persisted.entity).model_dump(),
        usage_recorded=persisted.usage_recorded,
    )


@router.get(
    f"/{settings.app.version}/flashcard-sets",
    response_model=list[FlashcardSetSummary],
    tags=["flashcards"],
)
async def list_flashcard_sets(
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> list[FlashcardSetSummary]:
    sets = await ContentQueryService(session).list_flashcard_sets(user.id)
    return [summarize_set(s) for s in sets]


@router.get(
    f"/{settings.app.version}/flashcard-sets/{{set_id:int}}",
    response_model=FlashcardSetRead,
    tags=["flashcards"],
)
async def get_flashcard_set(
    set_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> FlashcardSetRead:
    s = await ContentQueryService(session).get_flashcard_set(user.id, set_id)
    if not s:
        raise HTTPException(status_code=404, detail="Flashcard set not found")
    return read_set(s)
