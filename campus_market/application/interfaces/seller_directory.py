from abc import ABC, abstractmethod
from collections.abc import Iterable


class SellerDirectory(ABC):
    """Port for resolving seller display names."""

    @abstractmethod
    async def names_of(self, seller_ids: Iterable[int]) -> dict[int, str]:
        """Map every requested id to a display name, "" when unknown."""
        ...
