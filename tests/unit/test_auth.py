import pytest

from app.core.config import settings
from app.modules.auth import auth_backend, get_jwt_strategy

pytestmark = pytest.mark.unit


def test_backend_uses_signed_bearer_tokens():
    assert auth_backend.name == "jwt"
    strategy = get_jwt_strategy()
    assert strategy.lifetime_seconds == settings.jwt.token_lifetime_seconds
    assert strategy.algorithm == "HS256"

