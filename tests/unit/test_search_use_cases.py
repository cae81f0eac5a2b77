"""Unit tests for the search and suggestion use cases; storage is mocked."""
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from campus_market.application.use_cases.assemble_results import ResultAssembler
from campus_market.application.use_cases.search_listings import SearchListings, SuggestListingNames
from campus_market.domain.entities.listing import Listing
from campus_market.domain.enums.listing_status import ListingStatus
from campus_market.domain.search.pagination import PageOutOfRangeError
from campus_market.domain.search.query_plan import ListingField
from campus_market.domain.search.search_request import SearchRequest


def _make_store(total: int, rows: list[Listing] | None = None) -> MagicMock:
    store = MagicMock()
    store.count = AsyncMock(return_value=total)
    store.find = AsyncMock(return_value=rows or [])
    store.suggest_names = AsyncMock(return_value=["Desk lamp"])
    return store


def _make_categories(name: str = "Bikes") -> MagicMock:
    categories = MagicMock()
    categories.name_of = AsyncMock(return_value=name)
    categories.names_of = AsyncMock(return_value={1: name})
    return categories


def _make_use_case(store: MagicMock, categories: MagicMock | None = None) -> SearchListings:
    categories = categories or _make_categories()
    sellers = MagicMock()
    sellers.names_of = AsyncMock(return_value={100: "Alex"})
    return SearchListings(store, ResultAssembler(categories, sellers), categories)


def _bike(listing_id: int) -> Listing:
    return Listing(
        id=listing_id,
        name=f"Bike {listing_id}",
        price=Decimal("80"),
        category_id=1,
        seller_id=100,
        status=ListingStatus.ACTIVE,
    )


class TestSearchListings:
    @pytest.mark.asyncio
    async def test_first_page_window(self) -> None:
        store = _make_store(23, [_bike(i) for i in range(1, 11)])

        result = await _make_use_case(store).execute(SearchRequest(keyword="bike", page=1))

        assert result.total_count == 23
        assert result.total_pages == 3
        assert result.current_page == 1
        assert (result.limit, result.offset) == (10, 0)
        assert len(result.listings) == 10
        store.find.assert_awaited_once()
        assert store.find.await_args.kwargs == {"limit": 10, "offset": 0}

    @pytest.mark.asyncio
    async def test_count_and_find_share_predicates(self) -> None:
        store = _make_store(5, [_bike(1)])

        await _make_use_case(store).execute(SearchRequest(keyword="bike", sort="price_asc"))

        count_plan = store.count.await_args.args[0]
        find_plan = store.find.await_args.args[0]
        assert count_plan.predicates == find_plan.predicates
        assert count_plan.ordering == ()
        assert find_plan.ordering[0].field is ListingField.PRICE

    @pytest.mark.asyncio
    async def test_no_matches_raises_without_reading_rows(self) -> None:
        store = _make_store(0)

        with pytest.raises(PageOutOfRangeError):
            await _make_use_case(store).execute(SearchRequest(keyword="unicorn"))
        store.find.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_page_past_the_end(self) -> None:
        with pytest.raises(PageOutOfRangeError):
            await _make_use_case(_make_store(23)).execute(SearchRequest(page=4))

    @pytest.mark.asyncio
    async def test_selected_category_name(self) -> None:
        categories = _make_categories("Bicycles")
        store = _make_store(1, [_bike(1)])

        result = await _make_use_case(store, categories).execute(SearchRequest(category_id=1))

        assert result.selected_category_name == "Bicycles"

    @pytest.mark.asyncio
    async def test_no_category_selected(self) -> None:
        categories = _make_categories()
        store = _make_store(1, [_bike(1)])

        result = await _make_use_case(store, categories).execute(SearchRequest())

        assert result.selected_category_name == ""
        categories.name_of.assert_not_awaited()


class TestSuggestListingNames:
    @pytest.mark.asyncio
    async def test_returns_store_names(self) -> None:
        store = _make_store(0)
        names = await SuggestListingNames(store, limit=5).execute("lamp")
        assert names == ["Desk lamp"]
        assert store.suggest_names.await_args.kwargs == {"limit": 5}

    @pytest.mark.asyncio
    async def test_blank_keyword_returns_nothing(self) -> None:
        store = _make_store(0)
        assert await SuggestListingNames(store, limit=5).execute("  ") == []
        store.suggest_names.assert_not_awaited()
