from fastapi import APIRouter, Depends, Request

from campus_market.api.dependencies import get_category_lookup
from campus_market.api.schemas.listing_responses import (
    CategoryResponse,
    FlashMessageResponse,
    HomeResponse,
)
from campus_market.application.interfaces.category_lookup import CategoryLookup
from campus_market.infrastructure.notifications.session_flash import pop_flashes

router = APIRouter(tags=["home"])


@router.get("/", response_model=HomeResponse)
async def home(
    request: Request,
    categories: CategoryLookup = Depends(get_category_lookup),
) -> HomeResponse:
    """Landing view: category facets plus any pending notifications."""
    return HomeResponse(
        categories=[CategoryResponse.model_validate(c) for c in await categories.list_all()],
        messages=[FlashMessageResponse(**m) for m in pop_flashes(request.session)],
    )
