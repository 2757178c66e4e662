"""Model access for single-shot generation and streamed tutoring replies.

The client is built once by the application factory and handed to request
handlers through a dependency, so tests can swap in a double. Provider
imports are kept lazy to avoid import-time errors when credentials are
missing.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Callable, Optional, Protocol, Sequence

from pydantic_ai import Agent
from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    TextPart,
    UserPromptPart,
)

from app.core.config import settings
from app.core.logging import get_logger
from app.modules.chat.models.chat import ChatRole, ChatTurn
from app.modules.generation.errors import ModelInvocationFailed

logger = get_logger(__name__)


class ModelClient(Protocol):
    async def generate(self, prompt: str) -> str: ...

    def generate_stream(
        self, history: Sequence[ChatTurn], message: str
    ) -> AsyncIterator[str]: ...


def _build_google_model():
    """Build Google Gemini model for pydantic-ai (lazy import)."""
    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    provider = GoogleProvider(api_key=settings.gemini_api_key)
    return GoogleModel(settings.gemini_model, provider=provider)


def _build_openrouter_model():
    """Build OpenRouter model via OpenAI-compatible provider (lazy import)."""
    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    if not settings.openrouter_api_key:
        raise RuntimeError(
            "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your environment."
        )

    provider = OpenAIProvider(
        api_key=settings.openrouter_api_key,
        base_url="https://openrouter.ai/api/v1",
    )
    return OpenAIChatModel(settings.openrouter_model, provider=provider)


def build_model_by_settings():
    provider = (settings.model_provider or "google").lower()
    if provider == "openrouter":
        return _build_openrouter_model()
    return _build_google_model()


def to_model_messages(history: Sequence[ChatTurn]) -> list[ModelMessage]:
    messages: list[ModelMessage] = []
    for turn in history:
        if turn.role == ChatRole.USER:
            messages.append(ModelRequest(parts=[UserPromptPart(content=turn.content)]))
        else:
            messages.append(ModelResponse(parts=[TextPart(content=turn.content)]))
    return messages


class PydanticAIModelClient:
    """ModelClient backed by a pydantic-ai model producing plain text."""

    def __init__(
        self,
        model_factory: Callable[[], Any] = build_model_by_settings,
        *,
        max_stream_tokens: Optional[int] = None,
    ) -> None:
        self._model_factory = model_factory
        self._model: Any = None
        self.max_stream_tokens = max_stream_tokens

    def _agent(self) -> Agent[None, str]:
        if self._model is None:
            self._model = self._model_factory()
        return Agent[None, str](self._model, output_type=str)

    async def generate(self, prompt: str) -> str:
        try:
            agent = self._agent()
            res = await agent.run(prompt)
        except Exception as e:
            logger.error(f"Model call failed: {e}")
            raise ModelInvocationFailed() from e
        return res.output

    async def generate_stream(
        self, history: Sequence[ChatTurn], message: str
    ) -> AsyncIterator[str]:
        model_settings = (
            {"max_tokens": self.max_stream_tokens} if self.max_stream_tokens else None
        )
        try:
            agent = self._agent()
            async with agent.run_stream(
                message,
                message_history=to_model_messages(history),
                model_settings=model_settings,
            ) as result:
                async for chunk in result.stream_text(delta=True):
                    yield chunk
        except Exception as e:
            logger.error(f"Model stream failed: {e}")
            raise ModelInvocationFailed() from e
