from collections.abc import Iterable
from dataclasses import dataclass, field

from campus_market.application.interfaces.catalog_store import CatalogStore
from campus_market.application.use_cases.assemble_results import ListingView, ResultAssembler


@dataclass
class ModerationBoard:
    active: list[ListingView] = field(default_factory=list)
    inactive: list[ListingView] = field(default_factory=list)


def partition_for_moderation(listings: Iterable[ListingView]) -> ModerationBoard:
    """Split listings by status alone: public (ACTIVE, ENDED) versus the rest."""
    board = ModerationBoard()
    for listing in listings:
        (board.active if listing.status.is_public else board.inactive).append(listing)
    return board


class SellerDashboard:
    """Use case: every listing the current user has put up, any status."""

    def __init__(self, store: CatalogStore, assembler: ResultAssembler) -> None:
        self._store = store
        self._assembler = assembler

    async def load(self, seller_id: int) -> list[ListingView]:
        listings = await self._store.list_for_seller(seller_id)
        return await self._assembler.assemble(listings)


class ModerationDashboard:
    """Use case: all listings for administrator review, read in one query."""

    def __init__(self, store: CatalogStore, assembler: ResultAssembler) -> None:
        self._store = store
        self._assembler = assembler

    async def load(self) -> ModerationBoard:
        listings = await self._store.list_all()
        return partition_for_moderation(await self._assembler.assemble(listings))
