"""Generation errors and request models.

The pipeline itself lives in ``app.modules.generation.pipeline``; it is not
re-exported here because the content models import this package.
"""

from .errors import (
    GenerationError,
    Unauthorized,
    QuotaExceeded,
    InvalidPayload,
    ModelInvocationFailed,
    NormalizationFailed,
    ValidationFailed,
    PersistenceFailed,
)
from .models import ContentKind, Difficulty, GenerationRequest

__all__ = [
    "GenerationError",
    "Unauthorized",
    "QuotaExceeded",
    "InvalidPayload",
    "ModelInvocationFailed",
    "NormalizationFailed",
    "ValidationFailed",
    "PersistenceFailed",
    "ContentKind",
    "Difficulty",
    "GenerationRequest",
]
