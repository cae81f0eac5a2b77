from dataclasses import dataclass
from decimal import Decimal

from campus_market.application.interfaces.category_lookup import CategoryLookup
from campus_market.application.interfaces.seller_directory import SellerDirectory
from campus_market.domain.entities.listing import Listing
from campus_market.domain.enums.listing_condition import ListingCondition
from campus_market.domain.enums.listing_status import ListingStatus


@dataclass(frozen=True)
class ListingView:
    """A listing decorated with display names for presentation."""

    id: int
    name: str
    description: str
    price: Decimal
    price_text: str
    condition: ListingCondition
    status: ListingStatus
    category_id: int
    category_name: str
    seller_id: int
    seller_name: str


class ResultAssembler:
    """
    Joins listings with category and seller display names.

    Names are fetched once per call for the distinct ids present. A category
    or seller that vanished since the rows were read yields "" instead of
    failing the whole result.
    """

    def __init__(self, categories: CategoryLookup, sellers: SellerDirectory) -> None:
        self._categories = categories
        self._sellers = sellers

    async def assemble(self, listings: list[Listing]) -> list[ListingView]:
        if not listings:
            return []

        category_names = await self._categories.names_of(l.category_id for l in listings)
        seller_names = await self._sellers.names_of(l.seller_id for l in listings)

        return [
            ListingView(
                id=listing.id or 0,
                name=listing.name,
                description=listing.description,
                price=listing.price,
                price_text=listing.price_text,
                condition=listing.condition,
                status=listing.status,
                category_id=listing.category_id,
                category_name=category_names.get(listing.category_id, ""),
                seller_id=listing.seller_id,
                seller_name=seller_names.get(listing.seller_id, ""),
            )
            for listing in listings
        ]
