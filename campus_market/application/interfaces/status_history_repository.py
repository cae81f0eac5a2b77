from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from campus_market.domain.enums.listing_status import ListingStatus


@dataclass
class StatusHistoryRecord:
    id: int
    listing_id: int
    from_status: ListingStatus | None
    to_status: ListingStatus
    transitioned_at: datetime
    triggered_by: str


class StatusHistoryRepository(ABC):
    """Port for querying the status transition audit trail."""

    @abstractmethod
    async def get_history_for_listing(self, listing_id: int) -> list[StatusHistoryRecord]:
        ...
