import structlog

from campus_market.domain.enums.listing_condition import ListingCondition
from campus_market.domain.enums.listing_status import PUBLIC_STATUSES, ListingStatus
from campus_market.domain.search.query_plan import (
    ListingField,
    Operator,
    OrderTerm,
    Predicate,
    QueryPlan,
)
from campus_market.domain.search.search_request import SearchRequest

logger = structlog.get_logger(__name__)

DEFAULT_SORT = "relevance"

# Allow-list of sort keys. Each ordering ends on id so pages never overlap.
SORT_ORDERS: dict[str, tuple[OrderTerm, ...]] = {
    "relevance": (OrderTerm(ListingField.ID),),
    "price_asc": (OrderTerm(ListingField.PRICE), OrderTerm(ListingField.ID)),
    "price_desc": (OrderTerm(ListingField.PRICE, descending=True), OrderTerm(ListingField.ID)),
    "newest": (OrderTerm(ListingField.CREATED_AT, descending=True), OrderTerm(ListingField.ID)),
    "name": (OrderTerm(ListingField.NAME), OrderTerm(ListingField.ID)),
}

_PUBLIC_STATUS_VALUES: tuple[ListingStatus, ...] = tuple(
    sorted(PUBLIC_STATUSES, key=lambda s: s.value)
)


class QueryBuilder:
    """
    Translates a SearchRequest into a QueryPlan.

    Absent facets add no predicate; present ones are ANDed together. Sort and
    condition values outside their allow-lists are replaced, never forwarded.
    """

    def build(self, request: SearchRequest) -> QueryPlan:
        predicates: list[Predicate] = [self._visibility()]

        keyword = request.normalized_keyword
        if keyword is not None:
            predicates.append(Predicate.on(ListingField.NAME, Operator.CONTAINS, keyword))

        if request.category_id is not None:
            predicates.append(
                Predicate.on(ListingField.CATEGORY, Operator.EQUALS, request.category_id)
            )

        if request.min_price is not None:
            predicates.append(Predicate.on(ListingField.PRICE, Operator.AT_LEAST, request.min_price))
        if request.max_price is not None:
            predicates.append(Predicate.on(ListingField.PRICE, Operator.AT_MOST, request.max_price))

        condition = self._condition(request.condition)
        if condition is not None:
            predicates.append(Predicate.on(ListingField.CONDITION, Operator.EQUALS, condition))

        return QueryPlan(predicates=tuple(predicates), ordering=self._ordering(request.sort))

    def build_suggestions(self, keyword: str) -> QueryPlan:
        """Name-or-description match used by the search box suggestions."""
        predicates: list[Predicate] = [self._visibility()]
        keyword = keyword.strip()
        if keyword:
            predicates.append(
                Predicate(
                    fields=(ListingField.NAME, ListingField.DESCRIPTION),
                    operator=Operator.CONTAINS,
                    value=keyword,
                )
            )
        return QueryPlan(predicates=tuple(predicates), ordering=SORT_ORDERS["name"])

    @staticmethod
    def _visibility() -> Predicate:
        return Predicate.on(ListingField.STATUS, Operator.ONE_OF, _PUBLIC_STATUS_VALUES)

    @staticmethod
    def _ordering(sort: str | None) -> tuple[OrderTerm, ...]:
        if sort is None or sort == "":
            return SORT_ORDERS[DEFAULT_SORT]
        ordering = SORT_ORDERS.get(sort)
        if ordering is None:
            logger.warning("sort_key_rejected", sort=sort, substituted=DEFAULT_SORT)
            return SORT_ORDERS[DEFAULT_SORT]
        return ordering

    @staticmethod
    def _condition(raw: str | None) -> ListingCondition | None:
        if raw is None or raw == "":
            return None
        try:
            return ListingCondition(raw.upper())
        except ValueError:
            logger.warning("condition_filter_rejected", condition=raw)
            return None
