from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from campus_market.api.dependencies import (
    Identity,
    get_create_listing_use_case,
    get_lifecycle_manager,
    get_seller_dashboard,
    require_user,
)
from campus_market.api.schemas.listing_responses import (
    CreateListingRequest,
    FlashMessageResponse,
    ListingCreatedResponse,
    ListingResponse,
    SellerDashboardResponse,
)
from campus_market.application.use_cases.create_listing import (
    CreateListing,
    CreateListingInput,
    UnknownCategoryError,
)
from campus_market.application.use_cases.load_dashboards import SellerDashboard
from campus_market.application.use_cases.manage_listing_lifecycle import ListingLifecycleManager
from campus_market.domain.entities.listing import InvalidListingError
from campus_market.infrastructure.notifications.session_flash import pop_flashes

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/dashboard", response_model=SellerDashboardResponse)
async def dashboard(
    request: Request,
    identity: Identity = Depends(require_user),
    use_case: SellerDashboard = Depends(get_seller_dashboard),
) -> SellerDashboardResponse:
    """Listings put up by the current user, whatever their status."""
    listings = await use_case.load(identity.user_id)  # type: ignore[arg-type]
    return SellerDashboardResponse(
        listings=[ListingResponse.model_validate(v) for v in listings],
        messages=[FlashMessageResponse(**m) for m in pop_flashes(request.session)],
    )


@router.post(
    "/listings",
    status_code=status.HTTP_201_CREATED,
    response_model=ListingCreatedResponse,
)
async def create_listing(
    body: CreateListingRequest,
    identity: Identity = Depends(require_user),
    use_case: CreateListing = Depends(get_create_listing_use_case),
) -> ListingCreatedResponse:
    try:
        listing = await use_case.execute(
            CreateListingInput(
                seller_id=identity.user_id,  # type: ignore[arg-type]
                category_id=body.category_id,
                name=body.name,
                description=body.description,
                price=body.price,
                condition=body.condition,
            )
        )
    except (UnknownCategoryError, InvalidListingError) as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))

    return ListingCreatedResponse(id=listing.id, status=listing.status)  # type: ignore[arg-type]


@router.post("/listings/{listing_id}/end", status_code=status.HTTP_303_SEE_OTHER)
async def end_listing(
    listing_id: int,
    identity: Identity = Depends(require_user),
    manager: ListingLifecycleManager = Depends(get_lifecycle_manager),
) -> RedirectResponse:
    """Seller marks one of their active listings as ended."""
    await manager.end(listing_id, seller_id=identity.user_id)  # type: ignore[arg-type]
    return RedirectResponse("/user/dashboard", status_code=status.HTTP_303_SEE_OTHER)
