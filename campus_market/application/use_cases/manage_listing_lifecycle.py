import structlog

from campus_market.application.interfaces.catalog_store import CatalogStore, StorageFaultError
from campus_market.application.interfaces.event_publisher import EventPublisher
from campus_market.application.interfaces.notification_sink import NotificationSink
from campus_market.domain.enums.listing_status import ListingStatus
from campus_market.domain.events.domain_events import ListingStatusChangedEvent
from campus_market.domain.state_machine.lifecycle_state_machine import (
    LifecycleAction,
    LifecycleStateMachine,
    TransitionOutcome,
    TransitionResult,
)

logger = structlog.get_logger(__name__)

# (success, failure) feedback per action
_MESSAGES: dict[LifecycleAction, tuple[str, str]] = {
    LifecycleAction.APPROVE: ("Successfully approved item", "Error approving item"),
    LifecycleAction.DISAPPROVE: ("Successfully disapproved item", "Error disapproving item"),
    LifecycleAction.REMOVE: ("Successfully removed item", "Error removing item"),
    LifecycleAction.END: ("Successfully ended listing", "Error ending listing"),
}


class ListingLifecycleManager:
    """
    Applies seller and administrator actions to a listing's status.

    Each action becomes a conditional write in the catalog store (set the
    target status only while the current status is a legal source), so two
    racing actions on one listing produce exactly one APPLIED. "Already
    transitioned" and "unknown id" both surface as NOT_FOUND_OR_NOOP and share
    the error notification with genuine storage failures.
    """

    def __init__(
        self,
        store: CatalogStore,
        notifier: NotificationSink,
        event_publisher: EventPublisher,
        state_machine: LifecycleStateMachine | None = None,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._event_publisher = event_publisher
        self._state_machine = state_machine or LifecycleStateMachine()

    async def approve(self, listing_id: int, triggered_by: str = "administrator") -> TransitionResult:
        return await self.transition(LifecycleAction.APPROVE, listing_id, triggered_by)

    async def disapprove(self, listing_id: int, triggered_by: str = "administrator") -> TransitionResult:
        return await self.transition(LifecycleAction.DISAPPROVE, listing_id, triggered_by)

    async def remove(self, listing_id: int, triggered_by: str = "administrator") -> TransitionResult:
        return await self.transition(LifecycleAction.REMOVE, listing_id, triggered_by)

    async def end(self, listing_id: int, *, seller_id: int) -> TransitionResult:
        """Seller marks their own active listing as ended (e.g. sold)."""
        try:
            listing = await self._store.get_by_id(listing_id)
        except StorageFaultError as exc:
            return self._fault(LifecycleAction.END, listing_id, exc)

        if listing is None or listing.seller_id != seller_id:
            return self._noop(LifecycleAction.END, listing_id)

        return await self.transition(LifecycleAction.END, listing_id, f"seller:{seller_id}")

    async def transition(
        self, action: LifecycleAction, listing_id: int, triggered_by: str
    ) -> TransitionResult:
        target = action.target

        try:
            for source in self._state_machine.sources_for(target):
                applied = await self._store.conditional_update_status(
                    listing_id, source, target, triggered_by=triggered_by
                )
                if applied:
                    return await self._applied(action, listing_id, source, triggered_by)
        except StorageFaultError as exc:
            return self._fault(action, listing_id, exc)

        return self._noop(action, listing_id)

    async def _applied(
        self,
        action: LifecycleAction,
        listing_id: int,
        source: ListingStatus,
        triggered_by: str,
    ) -> TransitionResult:
        self._notifier.success(_MESSAGES[action][0])
        await self._event_publisher.publish(
            ListingStatusChangedEvent(
                listing_id=listing_id,
                from_status=source,
                to_status=action.target,
                triggered_by=triggered_by,
            )
        )
        logger.info(
            "listing_status_transitioned",
            listing_id=listing_id,
            from_status=source.value,
            to_status=action.target.value,
            triggered_by=triggered_by,
        )
        return TransitionResult(
            outcome=TransitionOutcome.APPLIED,
            listing_id=listing_id,
            from_status=source,
            to_status=action.target,
        )

    def _noop(self, action: LifecycleAction, listing_id: int) -> TransitionResult:
        self._notifier.error(_MESSAGES[action][1])
        logger.info("listing_transition_not_applied", listing_id=listing_id, action=action.value)
        return TransitionResult(
            outcome=TransitionOutcome.NOT_FOUND_OR_NOOP,
            listing_id=listing_id,
            to_status=action.target,
        )

    def _fault(self, action: LifecycleAction, listing_id: int, exc: Exception) -> TransitionResult:
        self._notifier.error(_MESSAGES[action][1])
        logger.error(
            "listing_transition_storage_fault",
            listing_id=listing_id,
            action=action.value,
            error=str(exc),
        )
        return TransitionResult(
            outcome=TransitionOutcome.STORAGE_FAULT,
            listing_id=listing_id,
            to_status=action.target,
            error_message=str(exc),
        )
