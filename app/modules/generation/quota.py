"""Admission control based on recent usage records."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db.schemas.generations import Generation


class QuotaGate(Protocol):
    async def exceeded(self, user_id: int) -> bool: ...


class UsageQuotaGate:
    """Allows ``limit`` generations per user in a rolling window of hours."""

    def __init__(self, session: AsyncSession, *, limit: int, window_hours: int) -> None:
        self.session = session
        self.limit = limit
        self.window = timedelta(hours=window_hours)

    def _since(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None) - self.window

    async def used(self, user_id: int) -> int:
        result = await self.session.execute(
            select(func.count(Generation.id)).where(
                Generation.user_id == user_id,
                Generation.created_at >= self._since(),
            )
        )
        return int(result.scalar_one())

    async def remaining(self, user_id: int) -> Optional[int]:
        """Generations left in the window, or None when unlimited."""
        if self.limit <= 0:
            return None
        return max(0, self.limit - await self.used(user_id))

    async def exceeded(self, user_id: int) -> bool:
        if self.limit <= 0:
            return False
        return await self.used(user_id) >= self.limit
