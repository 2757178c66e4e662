import os

# Settings are read at import time; provide them before the app is imported.
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_DB_PORT", "5432")
os.environ.setdefault("POSTGRES_DB_NAME", "study_forge_test")
os.environ.setdefault("POSTGRES_DB_USER", "postgres")
os.environ.setdefault("POSTGRES_DB_PASSWORD", "postgres")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("MODE", "test")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from tests.fixtures.database import (  # noqa: E402
    add_user,
    create_schema,
    make_engine,
    make_session_maker,
)


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = make_engine(tmp_path / "unit.db")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return make_session_maker(db_engine)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as s:
        yield s


@pytest_asyncio.fixture
async def user(session_maker):
    return await add_user(session_maker)
