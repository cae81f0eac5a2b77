from dataclasses import dataclass

import structlog

from campus_market.application.interfaces.catalog_store import CatalogStore
from campus_market.application.interfaces.category_lookup import CategoryLookup
from campus_market.application.use_cases.assemble_results import ListingView, ResultAssembler
from campus_market.domain.search.pagination import paginate
from campus_market.domain.search.query_builder import QueryBuilder
from campus_market.domain.search.search_request import SearchRequest

logger = structlog.get_logger(__name__)


@dataclass
class SearchResult:
    listings: list[ListingView]
    total_count: int
    total_pages: int
    current_page: int
    limit: int
    offset: int
    selected_category_name: str = ""


class SearchListings:
    """
    Use case: run a faceted, paginated catalog search.

    The count and the page of rows are read by two separate statements, so
    under concurrent writes they may see slightly different snapshots (a
    listing approved in between can make the page one row longer or shorter
    than the count implies). That gap is accepted; no lock spans both reads.

    Raises PageOutOfRangeError when the requested page does not exist,
    including when nothing matched at all.
    """

    def __init__(
        self,
        store: CatalogStore,
        assembler: ResultAssembler,
        categories: CategoryLookup,
        query_builder: QueryBuilder | None = None,
    ) -> None:
        self._store = store
        self._assembler = assembler
        self._categories = categories
        self._query_builder = query_builder or QueryBuilder()

    async def execute(self, request: SearchRequest) -> SearchResult:
        plan = self._query_builder.build(request)

        total = await self._store.count(plan.for_count())
        window = paginate(total, request.page, request.page_size)

        rows = await self._store.find(plan, limit=window.limit, offset=window.offset)
        listings = await self._assembler.assemble(rows)

        selected_category_name = ""
        if request.category_id is not None:
            selected_category_name = await self._categories.name_of(request.category_id)

        logger.info(
            "catalog_searched",
            keyword=request.normalized_keyword,
            category_id=request.category_id,
            total=total,
            page=window.current_page,
        )

        return SearchResult(
            listings=listings,
            total_count=total,
            total_pages=window.total_pages,
            current_page=window.current_page,
            limit=window.limit,
            offset=window.offset,
            selected_category_name=selected_category_name,
        )


class SuggestListingNames:
    """Use case: names of public listings whose name or description matches."""

    def __init__(
        self,
        store: CatalogStore,
        limit: int,
        query_builder: QueryBuilder | None = None,
    ) -> None:
        self._store = store
        self._limit = limit
        self._query_builder = query_builder or QueryBuilder()

    async def execute(self, keyword: str) -> list[str]:
        if not keyword.strip():
            return []
        plan = self._query_builder.build_suggestions(keyword)
        return await self._store.suggest_names(plan, limit=self._limit)
