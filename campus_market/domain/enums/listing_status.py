from enum import Enum


class ListingStatus(str, Enum):
    """All possible states in the listing lifecycle."""

    UNAPPROVED = "UNAPPROVED"
    DISAPPROVED = "DISAPPROVED"
    ACTIVE = "ACTIVE"
    ENDED = "ENDED"
    REMOVED = "REMOVED"

    @property
    def is_terminal(self) -> bool:
        """Terminal states cannot be transitioned out of."""
        return self in (ListingStatus.DISAPPROVED, ListingStatus.REMOVED)

    @property
    def is_public(self) -> bool:
        """Ended listings stay visible in the catalog alongside active ones."""
        return self in PUBLIC_STATUSES


PUBLIC_STATUSES: frozenset[ListingStatus] = frozenset({ListingStatus.ACTIVE, ListingStatus.ENDED})
