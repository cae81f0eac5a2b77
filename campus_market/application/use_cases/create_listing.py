from dataclasses import dataclass
from decimal import Decimal

import structlog

from campus_market.application.interfaces.catalog_store import CatalogStore
from campus_market.application.interfaces.category_lookup import CategoryLookup
from campus_market.application.interfaces.event_publisher import EventPublisher
from campus_market.domain.entities.listing import Listing
from campus_market.domain.enums.listing_condition import ListingCondition
from campus_market.domain.events.domain_events import ListingCreatedEvent

logger = structlog.get_logger(__name__)


class UnknownCategoryError(Exception):
    def __init__(self, category_id: int) -> None:
        self.category_id = category_id
        super().__init__(f"Category {category_id} does not exist.")


@dataclass
class CreateListingInput:
    seller_id: int
    category_id: int
    name: str
    description: str
    price: Decimal
    condition: ListingCondition


class CreateListing:
    """
    Use case: a registered user puts an item up for sale.

    New listings start UNAPPROVED and stay out of the public catalog until an
    administrator approves them.
    """

    def __init__(
        self,
        store: CatalogStore,
        categories: CategoryLookup,
        event_publisher: EventPublisher,
    ) -> None:
        self._store = store
        self._categories = categories
        self._event_publisher = event_publisher

    async def execute(self, input_data: CreateListingInput) -> Listing:
        if not await self._categories.name_of(input_data.category_id):
            raise UnknownCategoryError(input_data.category_id)

        listing = Listing.create(
            seller_id=input_data.seller_id,
            category_id=input_data.category_id,
            name=input_data.name,
            description=input_data.description,
            price=input_data.price,
            condition=input_data.condition,
        )
        listing = await self._store.add(listing)

        await self._event_publisher.publish(
            ListingCreatedEvent(
                listing_id=listing.id or 0,
                seller_id=listing.seller_id,
                category_id=listing.category_id,
                name=listing.name,
                price=listing.price,
            )
        )
        logger.info(
            "listing_created",
            listing_id=listing.id,
            seller_id=listing.seller_id,
            category_id=listing.category_id,
        )
        return listing
