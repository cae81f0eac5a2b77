from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from campus_market.config import settings

# Convert postgresql:// to postgresql+asyncpg://
_db_url = settings.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

# SQLite (tests, local runs) uses its own single-connection pools.
_pool_options: dict[str, Any] = (
    {} if _db_url.startswith("sqlite") else {"pool_size": 10, "max_overflow": 20}
)

engine = create_async_engine(
    _db_url,
    echo=False,
    pool_pre_ping=True,
    **_pool_options,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
