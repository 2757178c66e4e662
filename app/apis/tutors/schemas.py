from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from app.modules.chat.models.chat import ChatTurn


class TutorCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    source: str = Field(..., min_length=1, description="Material the tutor answers from")


class TutorRead(BaseModel):
    id: int
    title: str
    description: str
    created_at: str


class TutorMessageRead(BaseModel):
    id: int
    role: str
    content: str
    created_at: str


class ChatRequest(BaseModel):
    messages: Optional[list[ChatTurn]] = Field(
        default=None,
        description="Conversation so far; the last entry is the new user message",
    )
