"""Single-shot generation: admission, prompt, model, normalize, validate, persist.

Stages run strictly in order and the first failure short-circuits the rest by
raising a ``GenerationError`` subclass. Nothing runs in the background.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Optional, Protocol

from app.core.logging import get_logger
from app.modules.generation.errors import InvalidPayload, QuotaExceeded
from app.modules.generation.model_client import ModelClient
from app.modules.generation.models import ContentKind, GenerationRequest
from app.modules.generation.normalizer import normalize
from app.modules.generation.prompts import build_prompt
from app.modules.generation.quota import QuotaGate
from app.modules.generation.validator import ValidatedContent, validate
from app.modules.quiz.models import QuizGeneration
from app.modules.quiz.shuffler import shuffle_quiz

if TYPE_CHECKING:
    from app.core.db_services import PersistedContent

logger = get_logger(__name__)


class ContentSink(Protocol):
    async def commit(
        self,
        *,
        user_id: int,
        request: GenerationRequest,
        content: ValidatedContent,
    ) -> "PersistedContent": ...


class GenerationPipeline:
    def __init__(
        self,
        *,
        client: ModelClient,
        max_count: int,
        choice_count: int,
        quota: Optional[QuotaGate] = None,
        writer: Optional[ContentSink] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.client = client
        self.max_count = max_count
        self.choice_count = choice_count
        self.quota = quota
        self.writer = writer
        self.rng = rng or random.Random()

    async def preview(self, request: GenerationRequest) -> ValidatedContent:
        """Generate validated content without quota checks or persistence."""
        if request.kind == ContentKind.CHAT:
            raise InvalidPayload("Chat turns are not generated in a single shot")
        request.admit(max_count=self.max_count)

        prompt = build_prompt(request, choice_count=self.choice_count)
        text = await self.client.generate(prompt)
        logger.debug("Raw model response: %s", text, extra={"kind": request.kind.value})

        envelope = normalize(text)
        content = validate(envelope, request.kind, choice_count=self.choice_count)
        if isinstance(content, QuizGeneration):
            shuffle_quiz(content, self.rng)
        return content

    async def run(self, user_id: int, request: GenerationRequest) -> "PersistedContent":
        if self.quota is None or self.writer is None:
            raise RuntimeError("GenerationPipeline.run needs a quota gate and a writer")
        extra = {"user_id": user_id, "kind": request.kind.value}

        if await self.quota.exceeded(user_id):
            logger.info("Generation refused: limit exceeded", extra=extra)
            raise QuotaExceeded()

        content = await self.preview(request)
        persisted = await self.writer.commit(
            user_id=user_id, request=request, content=content
        )
        logger.info(
            "Generated %s #%s (usage recorded: %s)",
            request.kind.value,
            persisted.entity.id,
            persisted.usage_recorded,
            extra=extra,
        )
        return persisted
