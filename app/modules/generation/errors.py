"""Typed failures for the generation and chat paths.

Every failure carries a machine-checkable ``category`` (what the client
branches on), a finer ``code`` and the HTTP status used when it reaches the
API boundary. ``detail`` is safe to show to the caller; internal exception
text stays in the logs.
"""

from __future__ import annotations

from typing import Any


class GenerationError(Exception):
    category: str = "generation-failed"
    code: str = "generation_failed"
    status_code: int = 500
    default_detail: str = "Generation failed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "code": self.code,
            "detail": self.detail,
        }


class Unauthorized(GenerationError):
    category = "unauthorized"
    code = "unauthorized"
    status_code = 401
    default_detail = "Unauthorized request"


class QuotaExceeded(GenerationError):
    category = "quota-exceeded"
    code = "quota_exceeded"
    status_code = 429
    default_detail = "Generation limit exceeded"


class InvalidPayload(GenerationError):
    category = "invalid-payload"
    code = "invalid_payload"
    status_code = 400
    default_detail = "Invalid request, incorrect payload"


class ModelInvocationFailed(GenerationError):
    category = "generation-failed"
    code = "model_invocation_failed"
    status_code = 502
    default_detail = "The language model could not be reached"


class NormalizationFailed(GenerationError):
    """No parseable JSON object could be extracted from the model output."""

    category = "malformed-model-output"
    code = "normalization_failed"
    status_code = 502
    default_detail = "Failed to parse generated content"

    PARSE_FAILED = "parse_failed"
    NOT_AN_OBJECT = "not_an_object"

    def __init__(
        self,
        reason: str = PARSE_FAILED,
        text: str = "",
        detail: str | None = None,
    ) -> None:
        self.reason = reason
        # Raw model output, kept for diagnostics only.
        self.text = text
        super().__init__(detail)


class ValidationFailed(GenerationError):
    category = "malformed-model-output"
    code = "validation_failed"
    status_code = 502
    default_detail = "Generated content has an invalid structure"

    def __init__(self, detail: str | None = None, *, location: str = "") -> None:
        self.location = location
        super().__init__(detail)


class PersistenceFailed(GenerationError):
    category = "generation-failed"
    code = "persistence_failed"
    status_code = 500
    default_detail = "Failed to save generated content"


__all__ = [
    "GenerationError",
    "Unauthorized",
    "QuotaExceeded",
    "InvalidPayload",
    "ModelInvocationFailed",
    "NormalizationFailed",
    "ValidationFailed",
    "PersistenceFailed",
]
