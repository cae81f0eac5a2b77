"""Integration tests for the SQLAlchemy catalog store against SQLite."""
import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from campus_market.application.interfaces.notification_sink import (
    NotificationKind,
    NotificationSink,
)
from campus_market.application.use_cases.assemble_results import ResultAssembler
from campus_market.application.use_cases.create_listing import CreateListing, CreateListingInput
from campus_market.application.use_cases.load_dashboards import ModerationDashboard, SellerDashboard
from campus_market.application.use_cases.manage_listing_lifecycle import ListingLifecycleManager
from campus_market.application.use_cases.search_listings import SearchListings, SuggestListingNames
from campus_market.domain.enums.listing_condition import ListingCondition
from campus_market.domain.enums.listing_status import ListingStatus
from campus_market.domain.search.pagination import PageOutOfRangeError
from campus_market.domain.search.search_request import SearchRequest
from campus_market.domain.state_machine.lifecycle_state_machine import TransitionOutcome
from campus_market.infrastructure.database.models import ListingModel
from campus_market.infrastructure.database.repositories.catalog_store import SqlAlchemyCatalogStore
from campus_market.infrastructure.database.repositories.reference_lookups import (
    SqlAlchemyCategoryLookup,
    SqlAlchemySellerDirectory,
)
from campus_market.infrastructure.database.repositories.status_history_repository import (
    SqlAlchemyStatusHistoryRepository,
)
from campus_market.infrastructure.messaging.noop_publisher import NoOpEventPublisher


class RecordingSink(NotificationSink):
    def __init__(self) -> None:
        self.messages: list[tuple[NotificationKind, str]] = []

    def notify(self, kind: NotificationKind, message: str) -> None:
        self.messages.append((kind, message))


def _manager(session: AsyncSession) -> tuple[ListingLifecycleManager, RecordingSink]:
    sink = RecordingSink()
    return ListingLifecycleManager(SqlAlchemyCatalogStore(session), sink, NoOpEventPublisher()), sink


def _assembler(session: AsyncSession) -> ResultAssembler:
    return ResultAssembler(SqlAlchemyCategoryLookup(session), SqlAlchemySellerDirectory(session))


def _search(session: AsyncSession) -> SearchListings:
    return SearchListings(
        SqlAlchemyCatalogStore(session), _assembler(session), SqlAlchemyCategoryLookup(session)
    )


async def _status_of(factory: async_sessionmaker[AsyncSession], listing_id: int) -> ListingStatus:
    async with factory() as session:
        model = await session.get(ListingModel, listing_id)
        assert model is not None
        return ListingStatus(model.status)


class TestConditionalTransitions:
    @pytest.mark.asyncio
    async def test_approve_twice_applies_once(self, session_factory, seed_listing) -> None:  # type: ignore[no-untyped-def]
        listing_id = await seed_listing("Road bike", status=ListingStatus.UNAPPROVED)

        async with session_factory() as session:
            manager, sink = _manager(session)
            first = await manager.approve(listing_id)
            second = await manager.approve(listing_id)

        assert first.outcome == TransitionOutcome.APPLIED
        assert second.outcome == TransitionOutcome.NOT_FOUND_OR_NOOP
        assert sink.messages == [
            (NotificationKind.SUCCESS, "Successfully approved item"),
            (NotificationKind.ERROR, "Error approving item"),
        ]
        assert await _status_of(session_factory, listing_id) == ListingStatus.ACTIVE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("terminal", [ListingStatus.REMOVED, ListingStatus.DISAPPROVED])
    async def test_terminal_listings_cannot_be_approved(
        self, session_factory, seed_listing, terminal  # type: ignore[no-untyped-def]
    ) -> None:
        listing_id = await seed_listing("Old lamp", status=terminal)

        async with session_factory() as session:
            manager, _ = _manager(session)
            result = await manager.approve(listing_id)

        assert result.outcome == TransitionOutcome.NOT_FOUND_OR_NOOP
        assert await _status_of(session_factory, listing_id) == terminal

    @pytest.mark.asyncio
    async def test_unknown_id_is_noop(self, session_factory, reference_data) -> None:  # type: ignore[no-untyped-def]
        async with session_factory() as session:
            manager, _ = _manager(session)
            result = await manager.remove(987654)
        assert result.outcome == TransitionOutcome.NOT_FOUND_OR_NOOP

    @pytest.mark.asyncio
    async def test_remove_from_ended(self, session_factory, seed_listing) -> None:  # type: ignore[no-untyped-def]
        listing_id = await seed_listing("Desk", status=ListingStatus.ENDED)

        async with session_factory() as session:
            manager, _ = _manager(session)
            result = await manager.remove(listing_id)

        assert result.outcome == TransitionOutcome.APPLIED
        assert result.from_status == ListingStatus.ENDED
        assert await _status_of(session_factory, listing_id) == ListingStatus.REMOVED

    @pytest.mark.asyncio
    async def test_concurrent_approve_and_disapprove(self, session_factory, seed_listing) -> None:  # type: ignore[no-untyped-def]
        listing_id = await seed_listing("Contested kettle", status=ListingStatus.UNAPPROVED)

        async with session_factory() as first, session_factory() as second:
            approver, _ = _manager(first)
            disapprover, _ = _manager(second)
            results = await asyncio.gather(
                approver.approve(listing_id),
                disapprover.disapprove(listing_id),
            )

        assert sorted(r.outcome.value for r in results) == sorted(
            [TransitionOutcome.APPLIED.value, TransitionOutcome.NOT_FOUND_OR_NOOP.value]
        )
        applied = [r for r in results if r.outcome == TransitionOutcome.APPLIED]
        assert await _status_of(session_factory, listing_id) == applied[0].to_status

    @pytest.mark.asyncio
    async def test_transitions_are_recorded(self, session_factory, reference_data) -> None:  # type: ignore[no-untyped-def]
        async with session_factory() as session:
            listing = await CreateListing(
                SqlAlchemyCatalogStore(session), SqlAlchemyCategoryLookup(session), NoOpEventPublisher()
            ).execute(
                CreateListingInput(
                    seller_id=reference_data["sam"],
                    category_id=reference_data["books"],
                    name="Organic chemistry textbook",
                    description="8th edition",
                    price=Decimal("35"),
                    condition=ListingCondition.LIKE_NEW,
                )
            )
            manager, _ = _manager(session)
            await manager.approve(listing.id, triggered_by="administrator:1")
            await manager.end(listing.id, seller_id=reference_data["sam"])

            history = await SqlAlchemyStatusHistoryRepository(session).get_history_for_listing(
                listing.id
            )

        assert [(h.from_status, h.to_status) for h in history] == [
            (None, ListingStatus.UNAPPROVED),
            (ListingStatus.UNAPPROVED, ListingStatus.ACTIVE),
            (ListingStatus.ACTIVE, ListingStatus.ENDED),
        ]
        assert history[1].triggered_by == "administrator:1"
        assert history[2].triggered_by == f"seller:{reference_data['sam']}"


class TestSearch:
    @pytest.mark.asyncio
    async def test_bike_pages(self, session_factory, seed_listing, reference_data) -> None:  # type: ignore[no-untyped-def]
        for i in range(23):
            await seed_listing(f"Bike no. {i:02d}")
        await seed_listing("Bike awaiting review", status=ListingStatus.UNAPPROVED)
        await seed_listing("Bike taken down", status=ListingStatus.REMOVED)
        await seed_listing("Bike bell", category="books")

        request = SearchRequest(keyword="bike", category_id=reference_data["bikes"], page=1)
        async with session_factory() as session:
            result = await _search(session).execute(request)

        assert result.total_count == 23
        assert result.total_pages == 3
        assert result.offset == 0
        assert len(result.listings) == 10
        assert result.selected_category_name == "Bikes"
        assert all(v.seller_name == "Alex Rivera" for v in result.listings)

    @pytest.mark.asyncio
    async def test_pages_do_not_overlap(self, session_factory, seed_listing) -> None:  # type: ignore[no-untyped-def]
        for i in range(12):
            await seed_listing(f"Chair {i}", price="15.00")

        seen: list[int] = []
        async with session_factory() as session:
            for page in (1, 2):
                result = await _search(session).execute(
                    SearchRequest(keyword="chair", sort="price_asc", page=page)
                )
                seen.extend(v.id for v in result.listings)

        assert len(seen) == 12
        assert len(set(seen)) == 12

    @pytest.mark.asyncio
    async def test_page_past_the_end(self, session_factory, seed_listing) -> None:  # type: ignore[no-untyped-def]
        await seed_listing("Bike")
        async with session_factory() as session:
            with pytest.raises(PageOutOfRangeError):
                await _search(session).execute(SearchRequest(keyword="bike", page=2))

    @pytest.mark.asyncio
    async def test_percent_sign_matches_literally(self, session_factory, seed_listing) -> None:  # type: ignore[no-untyped-def]
        await seed_listing("100% cotton hoodie")
        await seed_listing("1000 piece puzzle")

        async with session_factory() as session:
            result = await _search(session).execute(SearchRequest(keyword="100%"))

        assert [v.name for v in result.listings] == ["100% cotton hoodie"]

    @pytest.mark.asyncio
    async def test_hostile_keyword_is_just_text(self, session_factory, seed_listing) -> None:  # type: ignore[no-untyped-def]
        await seed_listing("Lamp")
        async with session_factory() as session:
            with pytest.raises(PageOutOfRangeError):
                await _search(session).execute(SearchRequest(keyword="' OR '1'='1"))
            rows = (await session.execute(select(ListingModel))).scalars().all()
        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_price_and_condition_facets(self, session_factory, seed_listing) -> None:  # type: ignore[no-untyped-def]
        await seed_listing("Cheap desk", price="5.00")
        await seed_listing("Mid desk", price="50.00", condition=ListingCondition.NEW)
        await seed_listing("Fancy desk", price="500.00", condition=ListingCondition.NEW)

        async with session_factory() as session:
            result = await _search(session).execute(
                SearchRequest(
                    keyword="desk",
                    min_price=Decimal("10"),
                    max_price=Decimal("100"),
                    condition="new",
                )
            )

        assert [v.name for v in result.listings] == ["Mid desk"]
        assert result.listings[0].price_text == "50.00"

    @pytest.mark.asyncio
    async def test_price_descending(self, session_factory, seed_listing) -> None:  # type: ignore[no-untyped-def]
        await seed_listing("Tent A", price="20.00")
        await seed_listing("Tent B", price="80.00")
        await seed_listing("Tent C", price="40.00")

        async with session_factory() as session:
            result = await _search(session).execute(SearchRequest(keyword="tent", sort="price_desc"))

        assert [v.name for v in result.listings] == ["Tent B", "Tent C", "Tent A"]

    @pytest.mark.asyncio
    async def test_ended_listings_stay_visible(self, session_factory, seed_listing) -> None:  # type: ignore[no-untyped-def]
        await seed_listing("Sold scooter", status=ListingStatus.ENDED)
        async with session_factory() as session:
            result = await _search(session).execute(SearchRequest(keyword="scooter"))
        assert result.listings[0].status == ListingStatus.ENDED

    @pytest.mark.asyncio
    async def test_suggestions(self, session_factory, seed_listing) -> None:  # type: ignore[no-untyped-def]
        await seed_listing("Graphing calculator")
        await seed_listing("Textbook", description="includes calculator guide")
        await seed_listing("Calculator stand", status=ListingStatus.UNAPPROVED)

        async with session_factory() as session:
            names = await SuggestListingNames(SqlAlchemyCatalogStore(session), limit=10).execute(
                "calculator"
            )

        assert names == ["Graphing calculator", "Textbook"]


class TestDashboards:
    @pytest.mark.asyncio
    async def test_moderation_board(self, session_factory, seed_listing) -> None:  # type: ignore[no-untyped-def]
        active = await seed_listing("Active", price="12.5")
        ended = await seed_listing("Ended", status=ListingStatus.ENDED)
        removed = await seed_listing("Removed", status=ListingStatus.REMOVED)
        pending = await seed_listing("Pending", status=ListingStatus.UNAPPROVED)

        async with session_factory() as session:
            board = await ModerationDashboard(
                SqlAlchemyCatalogStore(session), _assembler(session)
            ).load()

        assert [v.id for v in board.active] == [active, ended]
        assert [v.id for v in board.inactive] == [removed, pending]
        assert board.active[0].price_text == "12.50"

    @pytest.mark.asyncio
    async def test_seller_dashboard(self, session_factory, seed_listing, reference_data) -> None:  # type: ignore[no-untyped-def]
        mine = await seed_listing("Mine", status=ListingStatus.DISAPPROVED, seller="sam")
        await seed_listing("Someone else's")

        async with session_factory() as session:
            views = await SellerDashboard(SqlAlchemyCatalogStore(session), _assembler(session)).load(
                reference_data["sam"]
            )

        assert [v.id for v in views] == [mine]
        assert views[0].seller_name == "Sam Okafor"
        assert views[0].category_name == "Bikes"

    @pytest.mark.asyncio
    async def test_unknown_category_renders_empty(self, session_factory, reference_data) -> None:  # type: ignore[no-untyped-def]
        async with session_factory() as session:
            names = await SqlAlchemyCategoryLookup(session).names_of([reference_data["bikes"], 999])
        assert names == {reference_data["bikes"]: "Bikes", 999: ""}

    @pytest.mark.asyncio
    async def test_unknown_seller_renders_empty(self, session_factory, reference_data) -> None:  # type: ignore[no-untyped-def]
        async with session_factory() as session:
            names = await SqlAlchemySellerDirectory(session).names_of([reference_data["sam"], 999])
        assert names == {reference_data["sam"]: "Sam Okafor", 999: ""}
