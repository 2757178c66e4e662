"""Database service classes for generated content, usage records and tutor chats."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.db.schemas.flashcards import Flashcard, FlashcardSet
from app.core.db.schemas.generations import Generation, GenerationKind
from app.core.db.schemas.quiz import Quiz, QuizQuestion
from app.core.db.schemas.tutors import MessageRole, Tutor, TutorMessage
from app.core.logging import get_logger
from app.modules.flashcards.models.flashcards import FlashcardGeneration
from app.modules.generation.errors import PersistenceFailed
from app.modules.generation.models import ContentKind, GenerationRequest
from app.modules.quiz.models import QuizGeneration

logger = get_logger(__name__)

PersistedEntity = Union[FlashcardSet, Quiz]

_USAGE_KINDS = {
    ContentKind.FLASHCARD_SET: GenerationKind.FLASHCARD_SET,
    ContentKind.QUIZ: GenerationKind.QUIZ,
}


@dataclass
class PersistedContent:
    entity: PersistedEntity
    # False when the content was saved but the usage record was not.
    usage_recorded: bool


class ContentWriter:
    """Writes generated content and then its usage record.

    The content (parent row plus children) is one transaction. The usage
    record is a second one, attempted only after the content is committed, so
    usage is never recorded for content that was not saved.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(
        self,
        *,
        user_id: int,
        request: GenerationRequest,
        content: Union[FlashcardGeneration, QuizGeneration],
    ) -> PersistedContent:
        extra = {"user_id": user_id, "kind": request.kind.value}
        try:
            if isinstance(content, FlashcardGeneration):
                entity: PersistedEntity = await self.save_flashcard_set(
                    user_id=user_id, request=request, content=content
                )
            else:
                entity = await self.save_quiz(
                    user_id=user_id, request=request, content=content
                )
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Content write failed: {e}", extra=extra)
            raise PersistenceFailed() from e

        # Detached, so a rolled-back usage write cannot expire the saved rows.
        self.session.expunge(entity)
        usage_recorded = await self.record_usage(user_id=user_id, kind=request.kind)
        return PersistedContent(entity=entity, usage_recorded=usage_recorded)

    async def save_flashcard_set(
        self,
        *,
        user_id: int,
        request: GenerationRequest,
        content: FlashcardGeneration,
    ) -> FlashcardSet:
        db_set = FlashcardSet(
            user_id=user_id,
            title=request.title,
            description=request.description,
            difficulty=request.difficulty.value,
            source=request.source,
        )
        self.session.add(db_set)
        await self.session.flush()

        for index, card in enumerate(content.flashcards):
            self.session.add(
                Flashcard(
                    flashcard_set_id=db_set.id,
                    question=card.question,
                    answer=card.answer,
                    order_index=index,
                )
            )

        await self.session.commit()

        result = await self.session.execute(
            select(FlashcardSet)
            .options(selectinload(FlashcardSet.flashcards))
            .where(FlashcardSet.id == db_set.id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def save_quiz(
        self,
        *,
        user_id: int,
        request: GenerationRequest,
        content: QuizGeneration,
    ) -> Quiz:
        db_quiz = Quiz(
            user_id=user_id,
            title=request.title,
            description=request.description,
            difficulty=request.difficulty.value,
            source=request.source,
        )
        self.session.add(db_quiz)
        await self.session.flush()

        for index, q in enumerate(content.questions):
            self.session.add(
                QuizQuestion(
                    quiz_id=db_quiz.id,
                    question=q.question,
                    possible_answers=list(q.possible_answers),
                    correct_answer=q.correct_answer,
                    order_index=index,
                )
            )

        await self.session.commit()

        result = await self.session.execute(
            select(Quiz)
            .options(selectinload(Quiz.questions))
            .where(Quiz.id == db_quiz.id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def record_usage(self, *, user_id: int, kind: ContentKind) -> bool:
        try:
            self.session.add(Generation(user_id=user_id, kind=_USAGE_KINDS[kind]))
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.warning(
                f"Content saved but usage record failed: {e}",
                extra={"user_id": user_id, "kind": kind.value},
            )
            return False
        return True


class ContentQueryService:
    """Read access to a user's own generated content."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_flashcard_sets(self, user_id: int) -> list[FlashcardSet]:
        rows = await self.session.execute(
            select(FlashcardSet)
            .where(FlashcardSet.user_id == user_id)
            .order_by(FlashcardSet.created_at.desc(), FlashcardSet.id.desc())
        )
        return list(rows.scalars().all())

    async def get_flashcard_set(self, user_id: int, set_id: int) -> Optional[FlashcardSet]:
        result = await self.session.execute(
            select(FlashcardSet)
            .options(selectinload(FlashcardSet.flashcards))
            .where(FlashcardSet.id == set_id, FlashcardSet.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_quizzes(self, user_id: int) -> list[Quiz]:
        rows = await self.session.execute(
            select(Quiz)
            .where(Quiz.user_id == user_id)
            .order_by(Quiz.created_at.desc(), Quiz.id.desc())
        )
        return list(rows.scalars().all())

    async def get_quiz(self, user_id: int, quiz_id: int) -> Optional[Quiz]:
        result = await self.session.execute(
            select(Quiz)
            .options(selectinload(Quiz.questions))
            .where(Quiz.id == quiz_id, Quiz.user_id == user_id)
        )
        return result.scalar_one_or_none()


class ChatMessageService:
    """Tutors and their ordered conversation history."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_tutor(
        self, *, user_id: int, title: str, description: str, source: str
    ) -> Tutor:
        tutor = Tutor(user_id=user_id, title=title, description=description, source=source)
        self.session.add(tutor)
        await self.session.commit()
        await self.session.refresh(tutor)
        return tutor

    async def list_tutors(self, user_id: int) -> list[Tutor]:
        rows = await self.session.execute(
            select(Tutor).where(Tutor.user_id == user_id).order_by(Tutor.id.desc())
        )
        return list(rows.scalars().all())

    async def get_tutor(self, *, user_id: int, tutor_id: int) -> Optional[Tutor]:
        result = await self.session.execute(
            select(Tutor).where(Tutor.id == tutor_id, Tutor.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_messages(self, *, user_id: int, tutor_id: int) -> list[TutorMessage]:
        rows = await self.session.execute(
            select(TutorMessage)
            .where(TutorMessage.tutor_id == tutor_id, TutorMessage.user_id == user_id)
            .order_by(TutorMessage.id)
        )
        return list(rows.scalars().all())

    async def add_message(
        self, *, user_id: int, tutor_id: int, role: MessageRole, content: str
    ) -> TutorMessage:
        message = TutorMessage(
            user_id=user_id, tutor_id=tutor_id, role=role, content=content
        )
        self.session.add(message)
        await self.session.commit()
        await self.session.refresh(message)
        return message
