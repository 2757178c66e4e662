from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class UsageRead(BaseModel):
    used: int
    limit: Optional[int] = None
    remaining: Optional[int] = None
    window_hours: int
