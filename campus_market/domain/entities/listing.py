from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from campus_market.domain.enums.listing_condition import ListingCondition
from campus_market.domain.enums.listing_status import ListingStatus

PRICE_QUANTUM = Decimal("0.01")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InvalidListingError(ValueError):
    """Raised when listing fields violate the catalog's invariants."""


@dataclass
class Listing:
    """
    A single item offered for sale on the campus marketplace.

    `seller_id` and `category_id` are plain references; display names are
    resolved at read time so a seller's identity can change independently of
    their listings.
    """

    # Identity (assigned by the catalog store on insert)
    id: int | None = None

    # Item data
    name: str = ""
    description: str = ""
    price: Decimal = Decimal("0.00")
    condition: ListingCondition = ListingCondition.USED

    # References
    category_id: int = 0
    seller_id: int = 0

    # Lifecycle
    status: ListingStatus = ListingStatus.UNAPPROVED

    # Timestamps
    created_at: datetime = field(default_factory=_utcnow)
    status_changed_at: datetime = field(default_factory=_utcnow)

    # -------------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        *,
        seller_id: int,
        category_id: int,
        name: str,
        description: str,
        price: Decimal,
        condition: ListingCondition,
    ) -> "Listing":
        """Build a new listing awaiting moderation."""
        name = name.strip()
        if not name:
            raise InvalidListingError("Listing name must not be empty.")
        if price < 0:
            raise InvalidListingError("Listing price must not be negative.")

        return cls(
            name=name,
            description=description.strip(),
            price=price.quantize(PRICE_QUANTUM),
            condition=condition,
            category_id=category_id,
            seller_id=seller_id,
            status=ListingStatus.UNAPPROVED,
        )

    @property
    def is_public(self) -> bool:
        return self.status.is_public

    @property
    def price_text(self) -> str:
        """Exact two-place rendering of the price, never via float."""
        return str(self.price.quantize(PRICE_QUANTUM))


@dataclass(frozen=True)
class Category:
    id: int
    name: str
