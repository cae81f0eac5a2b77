from dataclasses import dataclass

from campus_market.application.interfaces.catalog_store import CatalogStore
from campus_market.application.interfaces.status_history_repository import (
    StatusHistoryRecord,
    StatusHistoryRepository,
)


class ListingNotFoundError(Exception):
    def __init__(self, listing_id: int) -> None:
        self.listing_id = listing_id
        super().__init__(f"Listing {listing_id} not found.")


@dataclass
class GetListingHistoryOutput:
    listing_id: int
    history: list[StatusHistoryRecord]


class GetListingHistory:
    """Use case: retrieve the moderation audit trail for a listing."""

    def __init__(self, store: CatalogStore, history_repo: StatusHistoryRepository) -> None:
        self._store = store
        self._history_repo = history_repo

    async def execute(self, listing_id: int) -> GetListingHistoryOutput:
        listing = await self._store.get_by_id(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)

        history = await self._history_repo.get_history_for_listing(listing_id)
        return GetListingHistoryOutput(listing_id=listing_id, history=history)
