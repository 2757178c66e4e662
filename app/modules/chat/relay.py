"""Forward streamed model output to the client and persist the full reply.

A relay moves through ``idle -> streaming -> flushing -> done``. Chunks are
forwarded in arrival order and accumulated at the same time. When the model
stream ends normally the accumulated reply is persisted exactly once. If the
transport goes away first (generator closed or cancelled, or the disconnect
probe says so) the relay ends in ``aborted`` and nothing is persisted: a
truncated assistant turn is worse than a missing one.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

from app.core.logging import get_logger

logger = get_logger(__name__)

PersistReply = Callable[[str], Awaitable[Any]]
DisconnectProbe = Callable[[], Awaitable[bool]]


async def _replay(head: list[str], rest: AsyncIterator[str]) -> AsyncIterator[str]:
    try:
        for chunk in head:
            yield chunk
        async for chunk in rest:
            yield chunk
    finally:
        aclose = getattr(rest, "aclose", None)
        if aclose is not None:
            await aclose()


async def prime_stream(chunks: AsyncIterator[str]) -> AsyncIterator[str]:
    """Pull the first chunk now and return an iterator that replays it.

    A model failure before any output raises here, while the caller can still
    answer with an error status instead of an empty streamed body.
    """
    try:
        head = [await chunks.__anext__()]
    except StopAsyncIteration:
        head = []
    return _replay(head, chunks)


class RelayState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    FLUSHING = "flushing"
    DONE = "done"
    ABORTED = "aborted"


class StreamRelay:
    def __init__(
        self,
        chunks: AsyncIterator[str],
        persist: PersistReply,
        *,
        is_disconnected: Optional[DisconnectProbe] = None,
        log_extra: Optional[dict[str, Any]] = None,
    ) -> None:
        self.state = RelayState.IDLE
        self.error: Optional[BaseException] = None
        self.abort_reason: Optional[str] = None
        self._chunks = chunks
        self._persist = persist
        self._is_disconnected = is_disconnected
        self._parts: list[str] = []
        self._extra = log_extra or {}

    @property
    def reply(self) -> str:
        return "".join(self._parts)

    def _abort(self, reason: str) -> None:
        self.state = RelayState.ABORTED
        self.abort_reason = reason
        logger.info(
            "Stream aborted (%s) after %d chunks; reply not persisted",
            reason,
            len(self._parts),
            extra=self._extra,
        )

    async def _close_source(self) -> None:
        aclose = getattr(self._chunks, "aclose", None)
        if aclose is not None:
            await aclose()

    async def stream(self) -> AsyncIterator[str]:
        if self.state != RelayState.IDLE:
            raise RuntimeError("A StreamRelay can only be streamed once")
        self.state = RelayState.STREAMING

        try:
            async for chunk in self._chunks:
                if self._is_disconnected is not None and await self._is_disconnected():
                    self._abort("client disconnected")
                    break
                self._parts.append(chunk)
                yield chunk
        except (GeneratorExit, asyncio.CancelledError):
            self._abort("transport closed")
            raise
        except Exception as e:
            self.error = e
            logger.error(f"Model stream failed: {e}", extra=self._extra)
            self._abort("model stream failed")
        finally:
            if self.state == RelayState.ABORTED:
                await self._close_source()

        if self.state == RelayState.STREAMING:
            await self._flush()

    async def _flush(self) -> None:
        self.state = RelayState.FLUSHING
        reply = self.reply
        if not reply:
            logger.warning("Model stream ended without content", extra=self._extra)
            self.state = RelayState.DONE
            return
        try:
            await self._persist(reply)
        except asyncio.CancelledError:
            self._abort("transport closed during flush")
            raise
        except Exception as e:
            self.error = e
            logger.error(f"Failed to persist assistant reply: {e}", extra=self._extra)
            self._abort("persistence failed")
            return
        self.state = RelayState.DONE
