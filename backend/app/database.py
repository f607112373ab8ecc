from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from app.config import get_settings

settings = get_settings()

# sqlite:/// URLs run on the aiosqlite driver
database_url = settings.database_url.replace("sqlite:///", "sqlite+aiosqlite:///")

engine = create_async_engine(database_url, echo=settings.debug)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db():
    """Request-scoped session; each service commits its own unit of work."""
    async with async_session() as session:
        yield session


def _ensure_sqlite_directory() -> None:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def init_db():
    # Register every model on Base.metadata before creating tables
    import app.models  # noqa: F401

    _ensure_sqlite_directory()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
