from decimal import Decimal, InvalidOperation
from urllib.parse import urlencode

import structlog
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse

from campus_market.api.dependencies import (
    get_notifier,
    get_search_use_case,
    get_suggestions_use_case,
)
from campus_market.api.schemas.listing_responses import (
    ListingResponse,
    SearchFormRequest,
    SearchResultResponse,
)
from campus_market.application.interfaces.notification_sink import NotificationSink
from campus_market.application.use_cases.search_listings import (
    SearchListings,
    SuggestListingNames,
)
from campus_market.config import settings
from campus_market.domain.search.pagination import PageOutOfRangeError
from campus_market.domain.search.search_request import InvalidSearchRequestError, SearchRequest

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/search", tags=["search"])

MAX_KEYWORD_LENGTH = 256


def _category_param(raw: str | None) -> int | None:
    # Browsers submit an empty string for "all categories".
    if raw is None:
        return None
    raw = raw.strip()
    if not (raw.isascii() and raw.isdecimal()):
        return None
    return int(raw)


def _page_param(raw: str | None) -> int:
    if raw is None or not raw.strip():
        return 1
    try:
        return int(raw)
    except ValueError:
        raise InvalidSearchRequestError(f"Page {raw!r} is not a number.")


def _price_param(name: str, raw: str | None) -> Decimal | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = Decimal(raw.strip())
    except InvalidOperation:
        raise InvalidSearchRequestError(f"{name} {raw!r} is not a price.")
    if not value.is_finite() or value < 0:
        raise InvalidSearchRequestError(f"{name} {raw!r} is not a price.")
    return value


@router.post("", status_code=status.HTTP_303_SEE_OTHER)
async def search_form(body: SearchFormRequest) -> RedirectResponse:
    """Turn the search box submission into a bookmarkable search URL."""
    params: dict[str, str] = {}
    if body.keyword:
        params["k"] = body.keyword
    if body.categories is not None:
        params["c"] = str(body.categories)

    target = f"/search?{urlencode(params)}" if params else "/"
    return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)


def _search_request(
    k: str | None,
    c: str | None,
    min_price: str | None,
    max_price: str | None,
    cond: str | None,
    sort: str | None,
    page: str | None,
) -> SearchRequest:
    if k is not None and len(k) > MAX_KEYWORD_LENGTH:
        raise InvalidSearchRequestError("Keyword is too long.")
    return SearchRequest(
        keyword=k,
        category_id=_category_param(c),
        min_price=_price_param("min_price", min_price),
        max_price=_price_param("max_price", max_price),
        condition=cond,
        sort=sort,
        page=_page_param(page),
        page_size=settings.page_size,
    )


def _back_home() -> RedirectResponse:
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


@router.get("", response_model=SearchResultResponse)
async def search(
    k: str | None = Query(default=None),
    c: str | None = Query(default=None),
    min_price: str | None = Query(default=None),
    max_price: str | None = Query(default=None),
    cond: str | None = Query(default=None),
    sort: str | None = Query(default=None),
    page: str | None = Query(default=None),
    use_case: SearchListings = Depends(get_search_use_case),
    notifier: NotificationSink = Depends(get_notifier),
) -> SearchResultResponse | RedirectResponse:
    """Search the public catalog; malformed queries and unknown pages redirect home."""
    try:
        request = _search_request(k, c, min_price, max_price, cond, sort, page)
        result = await use_case.execute(request)
    except PageOutOfRangeError as exc:
        logger.info("search_page_out_of_range", page=exc.page, total_pages=exc.total_pages)
        if exc.total_pages == 0:
            notifier.error("No items found matching your search. Please try again.")
        else:
            notifier.error("That page of results does not exist.")
        return _back_home()
    except InvalidSearchRequestError as exc:
        logger.info("search_request_rejected", reason=str(exc))
        notifier.error("Invalid search. Please try again.")
        return _back_home()

    return SearchResultResponse(
        listings=[ListingResponse.model_validate(view) for view in result.listings],
        keyword=k,
        selected_category_id=request.category_id,
        selected_category_name=result.selected_category_name,
        min_price=request.min_price,
        max_price=request.max_price,
        condition=cond,
        sort=sort,
        total_count=result.total_count,
        page_count=result.total_pages,
        current_page=result.current_page,
        page_limit=result.limit,
        offset=result.offset,
    )


@router.get("/suggestions", response_model=list[str])
async def suggestions(
    key: str = Query(default="", max_length=256),
    use_case: SuggestListingNames = Depends(get_suggestions_use_case),
) -> list[str]:
    """Names of public listings whose name or description contains `key`."""
    return await use_case.execute(key)
