from dataclasses import dataclass
from enum import Enum

from campus_market.domain.enums.listing_status import ListingStatus


# Mapping of valid transitions: from_status -> set of allowed to_statuses
VALID_TRANSITIONS: dict[ListingStatus, frozenset[ListingStatus]] = {
    ListingStatus.UNAPPROVED: frozenset({ListingStatus.ACTIVE, ListingStatus.DISAPPROVED}),
    ListingStatus.ACTIVE: frozenset({ListingStatus.ENDED, ListingStatus.REMOVED}),
    ListingStatus.ENDED: frozenset({ListingStatus.REMOVED}),
    # Terminal states — no valid outgoing transitions
    ListingStatus.DISAPPROVED: frozenset(),
    ListingStatus.REMOVED: frozenset(),
}

# Order in which source states are tried when several are legal for one target.
_SOURCE_ORDER: tuple[ListingStatus, ...] = (
    ListingStatus.UNAPPROVED,
    ListingStatus.ACTIVE,
    ListingStatus.ENDED,
    ListingStatus.DISAPPROVED,
    ListingStatus.REMOVED,
)


class LifecycleAction(str, Enum):
    """Seller and administrator actions, each naming one target status."""

    APPROVE = "approve"
    DISAPPROVE = "disapprove"
    REMOVE = "remove"
    END = "end"

    @property
    def target(self) -> ListingStatus:
        return _ACTION_TARGETS[self]


_ACTION_TARGETS: dict[LifecycleAction, ListingStatus] = {
    LifecycleAction.APPROVE: ListingStatus.ACTIVE,
    LifecycleAction.DISAPPROVE: ListingStatus.DISAPPROVED,
    LifecycleAction.REMOVE: ListingStatus.REMOVED,
    LifecycleAction.END: ListingStatus.ENDED,
}


class TransitionOutcome(str, Enum):
    APPLIED = "APPLIED"
    NOT_FOUND_OR_NOOP = "NOT_FOUND_OR_NOOP"
    STORAGE_FAULT = "STORAGE_FAULT"


@dataclass(frozen=True)
class TransitionResult:
    outcome: TransitionOutcome
    listing_id: int
    to_status: ListingStatus
    from_status: ListingStatus | None = None
    error_message: str | None = None

    @property
    def applied(self) -> bool:
        return self.outcome is TransitionOutcome.APPLIED


class LifecycleStateMachine:
    """
    Answers transition questions from the table alone.

    Holds no listing state, so the conditional write in the store stays the
    only place where the current status is read.
    """

    def can_transition(self, from_status: ListingStatus, to_status: ListingStatus) -> bool:
        if from_status.is_terminal:
            return False
        return to_status in VALID_TRANSITIONS.get(from_status, frozenset())

    def sources_for(self, to_status: ListingStatus) -> tuple[ListingStatus, ...]:
        """Every status that may legally move to to_status, in a fixed order."""
        return tuple(s for s in _SOURCE_ORDER if self.can_transition(s, to_status))
