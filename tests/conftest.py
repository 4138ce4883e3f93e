import os
import tempfile
from contextlib import asynccontextmanager
from datetime import date
from pathlib import Path

import pytest

TEST_DB_PATH = Path(tempfile.gettempdir()) / "posts_api_test.db"

# Must be set before anything under src/ is imported
os.environ["ASYNC_DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["TIME_ZONE"] = "UTC"
os.environ["LOG_LEVEL"] = "WARNING"

from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from src.apps.blog.models.post import Post  # noqa: E402,F401
from src.apps.blog.repositories.post_repository import PostRepository  # noqa: E402
from src.apps.blog.services.post_service import PostService  # noqa: E402
from src.apps.blog.validators.post_validator import PostValidator  # noqa: E402

TODAY = date(2030, 6, 15)


@pytest.fixture
async def engine(tmp_path):
    """A throw-away SQLite database with the post table created."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'posts.db'}", poolclass=NullPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    @asynccontextmanager
    async def get_session():
        async with AsyncSession(engine, expire_on_commit=False) as session:
            yield session

    return get_session


@pytest.fixture
def repository(session_factory):
    return PostRepository(session_factory)


@pytest.fixture
def service(repository):
    return PostService(repository)


@pytest.fixture
def validator(repository):
    return PostValidator(repository, today=lambda: TODAY)


@pytest.fixture
def make_post(repository):
    """Insert a post straight through the repository."""
    counter = {"n": 0}

    async def _make_post(**overrides):
        counter["n"] += 1
        data = {
            "title": f"Post {counter['n']}",
            "slug": f"post-{counter['n']}",
            "body": "Body text",
        }
        data.update(overrides)
        return await repository.create(data)

    return _make_post


@pytest.fixture
def client():
    """HTTP client on the real app, backed by a fresh SQLite file."""
    from fastapi.testclient import TestClient

    from src.main import app

    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()
    with TestClient(app) as test_client:
        yield test_client
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()
