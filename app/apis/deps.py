from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.core.db.base import get_session, get_session_maker
from app.core.db.schemas.auth import User
from app.core.db_services import ContentWriter
from app.modules.auth import fastapi_users
from app.modules.chat.service import TutorChat
from app.modules.generation.errors import Unauthorized
from app.modules.generation.model_client import ModelClient
from app.modules.generation.pipeline import GenerationPipeline
from app.modules.generation.quota import UsageQuotaGate


_optional_user = fastapi_users.current_user(active=True, optional=True)


async def current_user(user: Optional[User] = Depends(_optional_user)) -> User:
    """Resolve the session user, reporting a missing one as a typed error."""
    if user is None:
        raise Unauthorized()
    return user


def get_model_client(request: Request) -> ModelClient:
    """The model client built by the application factory."""
    return request.app.state.model_client


def get_quota_gate(session: AsyncSession = Depends(get_session)) -> UsageQuotaGate:
    return UsageQuotaGate(
        session,
        limit=settings.generation.limit,
        window_hours=settings.generation.window_hours,
    )


def get_pipeline(
    client: ModelClient = Depends(get_model_client),
    session: AsyncSession = Depends(get_session),
    quota: UsageQuotaGate = Depends(get_quota_gate),
) -> GenerationPipeline:
    return GenerationPipeline(
        client=client,
        quota=quota,
        writer=ContentWriter(session),
        max_count=settings.generation.max_num,
        choice_count=settings.generation.quiz_choice_count,
    )


def get_tutor_chat(
    client: ModelClient = Depends(get_model_client),
    session: AsyncSession = Depends(get_session),
    session_maker: async_sessionmaker[AsyncSession] = Depends(get_session_maker),
    quota: UsageQuotaGate = Depends(get_quota_gate),
) -> TutorChat:
    return TutorChat(
        client=client, session=session, session_maker=session_maker, quota=quota
    )
