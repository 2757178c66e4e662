"""Account registration and bearer-token login for content owners."""

from .users import (
    UserCreate,
    UserRead,
    UserUpdate,
    auth_backend,
    fastapi_users,
    get_jwt_strategy,
)

__all__ = [
    "UserCreate",
    "UserRead",
    "UserUpdate",
    "auth_backend",
    "fastapi_users",
    "get_jwt_strategy",
]
