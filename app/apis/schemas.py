"""Request/response schemas shared by the generation routes."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from app.modules.generation.models import ContentKind, Difficulty, GenerationRequest


class GenerateContentRequest(BaseModel):
    source: Optional[str] = Field(default=None, description="Text to study from")
    num: Optional[int] = Field(default=None, description="Number of items to generate")
    title: Optional[str] = None
    description: Optional[str] = None
    difficulty: Optional[Difficulty] = None

    def to_generation_request(self, kind: ContentKind) -> GenerationRequest:
        return GenerationRequest(
            kind=kind,
            source=self.source,
            count=self.num,
            title=self.title,
            description=self.description,
            difficulty=self.difficulty,
        )


class ErrorBody(BaseModel):
    category: str
    code: str
    detail: str


class ErrorResponse(BaseModel):
    error: ErrorBody
