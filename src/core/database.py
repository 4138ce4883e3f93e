from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncGenerator, Optional

from sqlalchemy import DateTime
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import Field, SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.core.config import settings


def build_engine(db_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine; SQLite files get a fresh connection per session."""
    kwargs: dict[str, Any] = {"echo": echo}
    if db_url.startswith("sqlite"):
        kwargs["poolclass"] = NullPool
    return create_async_engine(db_url, **kwargs)


engine = build_engine(settings.ASYNC_DATABASE_URL, echo=settings.SQL_ECHO)


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, Any]:
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """Create all tables registered on the SQLModel metadata."""
    # models must be imported so their tables are registered
    import src.apps.blog.models.post  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


class BaseModel(SQLModel):
    """Base model with common fields."""

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=settings.get_now, sa_type=DateTime(timezone=True)  # type: ignore
    )
    updated_at: datetime = Field(
        default_factory=settings.get_now,
        sa_type=DateTime(timezone=True),  # type: ignore
        sa_column_kwargs={"onupdate": settings.get_now},
    )
    deleted_at: Optional[datetime] = Field(
        default=None, index=True, sa_type=DateTime(timezone=True)  # type: ignore
    )
