import asyncio

import pytest
from fastapi.testclient import TestClient

import main as app_main
from app.apis.deps import current_user, get_model_client
from app.core.db.base import get_session, get_session_maker
from tests.fixtures.database import add_user, create_schema, make_engine, make_session_maker
from tests.fixtures.fake_model import FakeModelClient


@pytest.fixture
def api_db(tmp_path):
    engine = make_engine(tmp_path / "api.db")
    asyncio.run(create_schema(engine))
    maker = make_session_maker(engine)
    user = asyncio.run(add_user(maker))
    yield maker, user
    asyncio.run(engine.dispose())


@pytest.fixture
def model():
    return FakeModelClient()


@pytest.fixture
def anonymous_client(api_db, model):
    maker, _ = api_db
    app = app_main.app

    async def _session():
        async with maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_session_maker] = lambda: maker
    app.dependency_overrides[get_model_client] = lambda: model
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(anonymous_client, api_db):
    _, user = api_db
    app_main.app.dependency_overrides[current_user] = lambda: user
    return anonymous_client
