"""Integration fixtures: a throwaway SQLite catalog per test."""
from collections.abc import AsyncIterator, Awaitable, Callable
from decimal import Decimal

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from campus_market.domain.enums.listing_condition import ListingCondition
from campus_market.domain.enums.listing_status import ListingStatus
from campus_market.infrastructure.database.connection import Base
from campus_market.infrastructure.database.models import CategoryModel, ListingModel, UserModel

SeedListing = Callable[..., Awaitable[int]]


@pytest_asyncio.fixture
async def test_engine(tmp_path) -> AsyncIterator[AsyncEngine]:  # type: ignore[no-untyped-def]
    # File-backed so separate sessions get separate connections.
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def reference_data(session_factory: async_sessionmaker[AsyncSession]) -> dict[str, int]:
    """Two categories and two sellers; returns their ids by name."""
    async with session_factory() as session:
        bikes = CategoryModel(name="Bikes")
        books = CategoryModel(name="Books")
        alex = UserModel(display_name="Alex Rivera")
        sam = UserModel(display_name="Sam Okafor")
        session.add_all([bikes, books, alex, sam])
        await session.commit()
        return {"bikes": bikes.id, "books": books.id, "alex": alex.id, "sam": sam.id}


@pytest_asyncio.fixture
async def seed_listing(
    session_factory: async_sessionmaker[AsyncSession], reference_data: dict[str, int]
) -> SeedListing:
    """Insert a listing row directly, bypassing the creation workflow."""

    async def _seed(
        name: str,
        *,
        status: ListingStatus = ListingStatus.ACTIVE,
        price: str = "10.00",
        description: str = "",
        category: str = "bikes",
        seller: str = "alex",
        condition: ListingCondition = ListingCondition.USED,
    ) -> int:
        async with session_factory() as session:
            model = ListingModel(
                name=name,
                description=description,
                price=Decimal(price),
                condition=condition,
                category_id=reference_data[category],
                seller_id=reference_data[seller],
                status=status,
            )
            session.add(model)
            await session.commit()
            return model.id

    return _seed
