from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_market.application.interfaces.status_history_repository import (
    StatusHistoryRecord,
    StatusHistoryRepository,
)
from campus_market.domain.enums.listing_status import ListingStatus
from campus_market.infrastructure.database.errors import storage_errors
from campus_market.infrastructure.database.models import ListingStatusHistoryModel


class SqlAlchemyStatusHistoryRepository(StatusHistoryRepository):
    """Reads the rows the catalog store writes alongside each status change."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_history_for_listing(self, listing_id: int) -> list[StatusHistoryRecord]:
        with storage_errors("get_history_for_listing"):
            result = await self._session.execute(
                select(ListingStatusHistoryModel)
                .where(ListingStatusHistoryModel.listing_id == listing_id)
                .order_by(
                    ListingStatusHistoryModel.transitioned_at.asc(),
                    ListingStatusHistoryModel.id.asc(),
                )
            )
            models = result.scalars().all()

        return [
            StatusHistoryRecord(
                id=m.id,
                listing_id=m.listing_id,
                from_status=ListingStatus(m.from_status) if m.from_status else None,
                to_status=ListingStatus(m.to_status),
                transitioned_at=m.transitioned_at,
                triggered_by=m.triggered_by,
            )
            for m in models
        ]
