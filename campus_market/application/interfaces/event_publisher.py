from abc import ABC, abstractmethod
from collections.abc import Iterable

from campus_market.domain.events.domain_events import DomainEvent


class EventPublisher(ABC):
    """Port for announcing listing events to other services."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        ...

    async def publish_many(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            await self.publish(event)
