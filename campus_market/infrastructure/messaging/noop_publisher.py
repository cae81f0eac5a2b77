"""
No-op event publisher — the default when no message broker is configured.
"""
import structlog

from campus_market.application.interfaces.event_publisher import EventPublisher
from campus_market.domain.events.domain_events import DomainEvent

logger = structlog.get_logger(__name__)


class NoOpEventPublisher(EventPublisher):
    """Logs and drops every event."""

    async def publish(self, event: DomainEvent) -> None:
        logger.debug("noop_event_discarded", event_type=type(event).__name__)
