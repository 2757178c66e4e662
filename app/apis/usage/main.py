from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.config import settings
from app.core.db.schemas.auth import User
from app.apis.deps import current_user, get_quota_gate
from app.modules.generation.quota import UsageQuotaGate
from .schemas import UsageRead


router = APIRouter()


@router.get(
    f"/{settings.app.version}/usage",
    response_model=UsageRead,
    tags=["usage"],
)
async def get_usage(
    user: Annotated[User, Depends(current_user)],
    gate: UsageQuotaGate = Depends(get_quota_gate),
) -> UsageRead:
    return UsageRead(
        used=await gate.used(user.id),
        limit=gate.limit if gate.limit > 0 else None,
        remaining=await gate.remaining(user.id),
        window_hours=int(gate.window.total_seconds() // 3600),
    )
