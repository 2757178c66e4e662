from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db.base import get_session
from app.core.db.schemas.auth import User
from app.core.db.schemas.tutors import Tutor
from app.core.db_services import ChatMessageService
from app.apis.deps import current_user, get_tutor_chat
from app.apis.schemas import ErrorResponse
from app.modules.chat.service import TutorChat
from .schemas import ChatRequest, TutorCreate, TutorMessageRead, TutorRead


router = APIRouter()

CurrentUser = Annotated[User, Depends(current_user)]


def _read_tutor(t: Tutor) -> TutorRead:
    return TutorRead(
        id=t.id,
        title=t.title,
        description=t.description,
        created_at=t.created_at.isoformat(),
    )


@router.post(
    f"/{settings.app.version}/tutors",
    response_model=TutorRead,
    status_code=status.HTTP_201_CREATED,
    tags=["tutors"],
)
async def create_tutor(
    req: TutorCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> TutorRead:
    tutor = await ChatMessageService(session).create_tutor(
        user_id=user.id, title=req.title, description=req.description, source=req.source
    )
    return _read_tutor(tutor)


@router.get(
    f"/{settings.app.version}/tutors",
    response_model=list[TutorRead],
    tags=["tutors"],
)
async def list_tutors(
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> list[TutorRead]:
    tutors = await ChatMessageService(session).list_tutors(user.id)
    return [_read_tutor(t) for t in tutors]


@router.get(
    f"/{settings.app.version}/tutors/{{tutor_id:int}}/messages",
    response_model=list[TutorMessageRead],
    tags=["tutors"],
)
async def list_tutor_messages(
    tutor_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> list[TutorMessageRead]:
    svc = ChatMessageService(session)
    if not await svc.get_tutor(user_id=user.id, tutor_id=tutor_id):
        raise HTTPException(status_code=404, detail="Tutor not found")
    messages = await svc.list_messages(user_id=user.id, tutor_id=tutor_id)
    return [
        TutorMessageRead(
            id=m.id,
            role=m.role.value,
            content=m.content,
            created_at=m.created_at.isoformat(),
        )
        for m in messages
    ]


@router.post(
    f"/{settings.app.version}/tutors/{{tutor_id:int}}/chat",
    responses={
        200: {"content": {"text/plain": {}}},
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
    },
    tags=["tutors"],
)
async def chat_with_tutor(
    tutor_id: int,
    req: ChatRequest,
    request: Request,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
    chat: TutorChat = Depends(get_tutor_chat),
) -> StreamingResponse:
    tutor = await ChatMessageService(session).get_tutor(user_id=user.id, tutor_id=tutor_id)
    if not tutor:
        raise HTTPException(status_code=404, detail="Tutor not found")

    relay = await chat.open(
        user_id=user.id,
        tutor=tutor,
        messages=req.messages or [],
        is_disconnected=request.is_disconnected,
    )
    return StreamingResponse(
        relay.stream(),
        media_type="text/plain; charset=utf-8",
        headers={"Cache-Control": "no-cache"},
    )
