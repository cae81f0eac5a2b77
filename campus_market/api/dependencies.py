"""
FastAPI dependency injection wiring.

Each dependency function returns a fully-constructed object with its
collaborators injected — keeping the route handlers thin.
"""
from collections.abc import AsyncGenerator
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from campus_market.application.interfaces.catalog_store import CatalogStore
from campus_market.application.interfaces.category_lookup import CategoryLookup
from campus_market.application.interfaces.event_publisher import EventPublisher
from campus_market.application.interfaces.notification_sink import NotificationSink
from campus_market.application.interfaces.seller_directory import SellerDirectory
from campus_market.application.interfaces.status_history_repository import (
    StatusHistoryRepository,
)
from campus_market.application.use_cases.assemble_results import ResultAssembler
from campus_market.application.use_cases.create_listing import CreateListing
from campus_market.application.use_cases.get_listing_history import GetListingHistory
from campus_market.application.use_cases.load_dashboards import (
    ModerationDashboard,
    SellerDashboard,
)
from campus_market.application.use_cases.manage_listing_lifecycle import ListingLifecycleManager
from campus_market.application.use_cases.search_listings import SearchListings, SuggestListingNames
from campus_market.config import settings
from campus_market.infrastructure.database.connection import get_db_session
from campus_market.infrastructure.database.repositories.catalog_store import (
    SqlAlchemyCatalogStore,
)
from campus_market.infrastructure.database.repositories.reference_lookups import (
    SqlAlchemyCategoryLookup,
    SqlAlchemySellerDirectory,
)
from campus_market.infrastructure.database.repositories.status_history_repository import (
    SqlAlchemyStatusHistoryRepository,
)
from campus_market.infrastructure.messaging.noop_publisher import NoOpEventPublisher
from campus_market.infrastructure.messaging.rabbitmq_publisher import RabbitMQPublisher
from campus_market.infrastructure.notifications.session_flash import SessionFlashSink


# ---- Identity ---------------------------------------------------------------

@dataclass(frozen=True)
class Identity:
    """Who is asking, as recorded in the session by the login flow."""

    user_id: int | None
    is_administrator: bool = False


def get_identity(request: Request) -> Identity:
    user_id = request.session.get("user_id")
    return Identity(
        user_id=int(user_id) if user_id is not None else None,
        is_administrator=bool(request.session.get("is_administrator", False)),
    )


def require_user(identity: Identity = Depends(get_identity)) -> Identity:
    if identity.user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required.")
    return identity


def require_administrator(identity: Identity = Depends(get_identity)) -> Identity:
    if identity.user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required.")
    if not identity.is_administrator:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrators only.")
    return identity


# ---- Low-level dependencies ------------------------------------------------

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_db_session():
        yield session


def get_catalog_store(session: AsyncSession = Depends(get_session)) -> CatalogStore:
    return SqlAlchemyCatalogStore(session)


def get_category_lookup(session: AsyncSession = Depends(get_session)) -> CategoryLookup:
    return SqlAlchemyCategoryLookup(session)


def get_seller_directory(session: AsyncSession = Depends(get_session)) -> SellerDirectory:
    return SqlAlchemySellerDirectory(session)


def get_history_repo(session: AsyncSession = Depends(get_session)) -> StatusHistoryRepository:
    return SqlAlchemyStatusHistoryRepository(session)


def get_event_publisher() -> EventPublisher:
    if settings.event_publisher == "rabbitmq":
        return RabbitMQPublisher()
    return NoOpEventPublisher()


def get_notifier(request: Request) -> NotificationSink:
    return SessionFlashSink(request.session)


def get_result_assembler(
    categories: CategoryLookup = Depends(get_category_lookup),
    sellers: SellerDirectory = Depends(get_seller_directory),
) -> ResultAssembler:
    return ResultAssembler(categories, sellers)


# ---- Use-case dependencies -------------------------------------------------

def get_search_use_case(
    store: CatalogStore = Depends(get_catalog_store),
    assembler: ResultAssembler = Depends(get_result_assembler),
    categories: CategoryLookup = Depends(get_category_lookup),
) -> SearchListings:
    return SearchListings(store, assembler, categories)


def get_suggestions_use_case(
    store: CatalogStore = Depends(get_catalog_store),
) -> SuggestListingNames:
    return SuggestListingNames(store, limit=settings.suggestion_limit)


def get_lifecycle_manager(
    store: CatalogStore = Depends(get_catalog_store),
    notifier: NotificationSink = Depends(get_notifier),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> ListingLifecycleManager:
    return ListingLifecycleManager(store, notifier, event_publisher)


def get_seller_dashboard(
    store: CatalogStore = Depends(get_catalog_store),
    assembler: ResultAssembler = Depends(get_result_assembler),
) -> SellerDashboard:
    return SellerDashboard(store, assembler)


def get_moderation_dashboard(
    store: CatalogStore = Depends(get_catalog_store),
    assembler: ResultAssembler = Depends(get_result_assembler),
) -> ModerationDashboard:
    return ModerationDashboard(store, assembler)


def get_create_listing_use_case(
    store: CatalogStore = Depends(get_catalog_store),
    categories: CategoryLookup = Depends(get_category_lookup),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> CreateListing:
    return CreateListing(store, categories, event_publisher)


def get_listing_history_use_case(
    store: CatalogStore = Depends(get_catalog_store),
    history_repo: StatusHistoryRepository = Depends(get_history_repo),
) -> GetListingHistory:
    return GetListingHistory(store, history_repo)
