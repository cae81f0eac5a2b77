from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from campus_market.domain.enums.listing_status import ListingStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ListingCreatedEvent(DomainEvent):
    """Published when a registered user lists a new item for sale."""

    listing_id: int = 0
    seller_id: int = 0
    category_id: int = 0
    name: str = ""
    price: Decimal = Decimal("0")


@dataclass(frozen=True)
class ListingStatusChangedEvent(DomainEvent):
    """Published whenever a listing's status changes."""

    listing_id: int = 0
    from_status: ListingStatus | None = None
    to_status: ListingStatus = ListingStatus.UNAPPROVED
    triggered_by: str = ""
