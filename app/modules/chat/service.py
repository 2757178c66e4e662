"""Tutor conversations: admit the turn, persist it, and relay the reply."""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.db.schemas.tutors import MessageRole, Tutor
from app.core.db_services import ChatMessageService
from app.modules.chat.models.chat import ChatRole, ChatTurn
from app.modules.chat.relay import DisconnectProbe, StreamRelay, prime_stream
from app.modules.generation.errors import InvalidPayload, QuotaExceeded
from app.modules.generation.model_client import ModelClient
from app.modules.generation.models import ContentKind
from app.modules.generation.prompts import build_tutor_history
from app.modules.generation.quota import QuotaGate


class TutorChat:
    def __init__(
        self,
        *,
        client: ModelClient,
        session: AsyncSession,
        session_maker: async_sessionmaker[AsyncSession],
        quota: Optional[QuotaGate] = None,
    ) -> None:
        self.client = client
        self.session = session
        # The assistant turn is written after the request-scoped session is
        # gone, so it gets its own short-lived session.
        self.session_maker = session_maker
        self.quota = quota

    async def open(
        self,
        *,
        user_id: int,
        tutor: Tutor,
        messages: Sequence[ChatTurn],
        is_disconnected: Optional[DisconnectProbe] = None,
    ) -> StreamRelay:
        """Persist the user's turn and return an idle relay for the reply."""
        if self.quota is not None and await self.quota.exceeded(user_id):
            raise QuotaExceeded()
        if not messages:
            raise InvalidPayload("messages must contain at least one turn")
        latest = messages[-1]
        if latest.role != ChatRole.USER or not latest.content.strip():
            raise InvalidPayload("The last message must be a non-empty user message")

        await ChatMessageService(self.session).add_message(
            user_id=user_id,
            tutor_id=tutor.id,
            role=MessageRole.USER,
            content=latest.content,
        )

        history = build_tutor_history(tutor.source, messages[:-1])
        # Failures before the first chunk surface as a typed error, not a 200.
        chunks = await prime_stream(
            self.client.generate_stream(history, latest.content)
        )
        tutor_id = tutor.id

        async def persist(reply: str) -> None:
            async with self.session_maker() as session:
                await ChatMessageService(session).add_message(
                    user_id=user_id,
                    tutor_id=tutor_id,
                    role=MessageRole.ASSISTANT,
                    content=reply,
                )

        return StreamRelay(
            chunks,
            persist,
            is_disconnected=is_disconnected,
            log_extra={"user_id": user_id, "kind": ContentKind.CHAT.value},
        )
