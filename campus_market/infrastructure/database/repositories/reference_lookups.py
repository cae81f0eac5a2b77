from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_market.application.interfaces.category_lookup import CategoryLookup
from campus_market.application.interfaces.seller_directory import SellerDirectory
from campus_market.domain.entities.listing import Category
from campus_market.infrastructure.database.errors import storage_errors
from campus_market.infrastructure.database.models import CategoryModel, UserModel


class SqlAlchemyCategoryLookup(CategoryLookup):
    """Category names straight from the categories table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def name_of(self, category_id: int) -> str:
        with storage_errors("category_name_of"):
            model = await self._session.get(CategoryModel, category_id)
        return model.name if model is not None else ""

    async def names_of(self, category_ids: Iterable[int]) -> dict[int, str]:
        ids = set(category_ids)
        if not ids:
            return {}
        with storage_errors("category_names_of"):
            result = await self._session.execute(
                select(CategoryModel.id, CategoryModel.name).where(CategoryModel.id.in_(ids))
            )
            found = {row.id: row.name for row in result}
        return {cid: found.get(cid, "") for cid in ids}

    async def list_all(self) -> list[Category]:
        with storage_errors("category_list_all"):
            result = await self._session.execute(
                select(CategoryModel).order_by(CategoryModel.name.asc())
            )
            return [Category(id=m.id, name=m.name) for m in result.scalars().all()]


class SqlAlchemySellerDirectory(SellerDirectory):
    """Seller display names from the users table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def names_of(self, seller_ids: Iterable[int]) -> dict[int, str]:
        ids = set(seller_ids)
        if not ids:
            return {}
        with storage_errors("seller_names_of"):
            result = await self._session.execute(
                select(UserModel.id, UserModel.display_name).where(UserModel.id.in_(ids))
            )
            found = {row.id: row.display_name for row in result}
        return {sid: found.get(sid, "") for sid in ids}
