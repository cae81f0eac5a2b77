from abc import ABC, abstractmethod
from collections.abc import Iterable

from campus_market.domain.entities.listing import Category


class CategoryLookup(ABC):
    """Port for resolving category reference data."""

    @abstractmethod
    async def name_of(self, category_id: int) -> str:
        """Return the category's name, or "" when it no longer exists."""
        ...

    @abstractmethod
    async def list_all(self) -> list[Category]:
        ...

    async def names_of(self, category_ids: Iterable[int]) -> dict[int, str]:
        return {cid: await self.name_of(cid) for cid in set(category_ids)}
