from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from campus_market.api.dependencies import (
    Identity,
    get_lifecycle_manager,
    get_listing_history_use_case,
    get_moderation_dashboard,
    require_administrator,
)
from campus_market.api.schemas.listing_responses import (
    FlashMessageResponse,
    ListingHistoryResponse,
    ListingResponse,
    ModerationDashboardResponse,
    StatusHistoryEntryResponse,
)
from campus_market.application.use_cases.get_listing_history import (
    GetListingHistory,
    ListingNotFoundError,
)
from campus_market.application.use_cases.load_dashboards import ModerationDashboard
from campus_market.application.use_cases.manage_listing_lifecycle import ListingLifecycleManager
from campus_market.infrastructure.notifications.session_flash import pop_flashes

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_administrator)],
)

DASHBOARD_URL = "/admin/dashboard"


def _back_to_dashboard() -> RedirectResponse:
    return RedirectResponse(DASHBOARD_URL, status_code=status.HTTP_303_SEE_OTHER)


def _actor(identity: Identity) -> str:
    return f"administrator:{identity.user_id}"


@router.get("/dashboard", response_model=ModerationDashboardResponse)
async def dashboard(
    request: Request,
    use_case: ModerationDashboard = Depends(get_moderation_dashboard),
) -> ModerationDashboardResponse:
    """Every listing, split into publicly visible and everything else."""
    board = await use_case.load()
    return ModerationDashboardResponse(
        active=[ListingResponse.model_validate(v) for v in board.active],
        inactive=[ListingResponse.model_validate(v) for v in board.inactive],
        messages=[FlashMessageResponse(**m) for m in pop_flashes(request.session)],
    )


@router.post("/listings/{listing_id}/approve", status_code=status.HTTP_303_SEE_OTHER)
async def approve(
    listing_id: int,
    identity: Identity = Depends(require_administrator),
    manager: ListingLifecycleManager = Depends(get_lifecycle_manager),
) -> RedirectResponse:
    await manager.approve(listing_id, triggered_by=_actor(identity))
    return _back_to_dashboard()


@router.post("/listings/{listing_id}/disapprove", status_code=status.HTTP_303_SEE_OTHER)
async def disapprove(
    listing_id: int,
    identity: Identity = Depends(require_administrator),
    manager: ListingLifecycleManager = Depends(get_lifecycle_manager),
) -> RedirectResponse:
    await manager.disapprove(listing_id, triggered_by=_actor(identity))
    return _back_to_dashboard()


@router.post("/listings/{listing_id}/remove", status_code=status.HTTP_303_SEE_OTHER)
async def remove(
    listing_id: int,
    identity: Identity = Depends(require_administrator),
    manager: ListingLifecycleManager = Depends(get_lifecycle_manager),
) -> RedirectResponse:
    await manager.remove(listing_id, triggered_by=_actor(identity))
    return _back_to_dashboard()


@router.get("/listings/{listing_id}/history", response_model=ListingHistoryResponse)
async def listing_history(
    listing_id: int,
    use_case: GetListingHistory = Depends(get_listing_history_use_case),
) -> ListingHistoryResponse:
    try:
        output = await use_case.execute(listing_id)
    except ListingNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found.")

    return ListingHistoryResponse(
        listing_id=output.listing_id,
        history=[
            StatusHistoryEntryResponse(
                id=entry.id,
                from_status=entry.from_status,
                to_status=entry.to_status,
                transitioned_at=entry.transitioned_at,
                triggered_by=entry.triggered_by,
            )
            for entry in output.history
        ],
    )
