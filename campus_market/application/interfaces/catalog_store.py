from abc import ABC, abstractmethod

from campus_market.domain.entities.listing import Listing
from campus_market.domain.enums.listing_status import ListingStatus
from campus_market.domain.search.query_plan import QueryPlan


class StorageFaultError(Exception):
    """The catalog store was unreachable or a statement failed."""


class CatalogStore(ABC):
    """Port for reading and mutating Listing records."""

    @abstractmethod
    async def find(self, plan: QueryPlan, *, limit: int, offset: int) -> list[Listing]:
        ...

    @abstractmethod
    async def count(self, plan: QueryPlan) -> int:
        ...

    @abstractmethod
    async def conditional_update_status(
        self,
        listing_id: int,
        expected: ListingStatus,
        new: ListingStatus,
        *,
        triggered_by: str,
    ) -> bool:
        """
        Set status to `new` only if it currently equals `expected`.

        Returns True when a row changed. The change and its history entry are
        committed together.
        """
        ...

    @abstractmethod
    async def add(self, listing: Listing) -> Listing:
        """Persist a new listing and return it with its assigned id."""
        ...

    @abstractmethod
    async def get_by_id(self, listing_id: int) -> Listing | None:
        ...

    @abstractmethod
    async def list_for_seller(self, seller_id: int) -> list[Listing]:
        ...

    @abstractmethod
    async def list_all(self) -> list[Listing]:
        ...

    @abstractmethod
    async def suggest_names(self, plan: QueryPlan, *, limit: int) -> list[str]:
        ...
