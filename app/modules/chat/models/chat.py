from enum import Enum

from pydantic import BaseModel, Field


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatTurn(BaseModel):
    role: ChatRole = Field(..., description="Author of the turn: user or assistant")
    content: str = Field(..., description="Content of the message")
