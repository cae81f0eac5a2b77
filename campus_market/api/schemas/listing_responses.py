from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from campus_market.domain.enums.listing_condition import ListingCondition
from campus_market.domain.enums.listing_status import ListingStatus


class FlashMessageResponse(BaseModel):
    kind: str
    message: str


class CategoryResponse(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class HomeResponse(BaseModel):
    categories: list[CategoryResponse]
    messages: list[FlashMessageResponse] = []


class ListingResponse(BaseModel):
    id: int
    name: str
    description: str
    price: Decimal
    price_text: str
    condition: ListingCondition
    status: ListingStatus
    category_id: int
    category_name: str
    seller_id: int
    seller_name: str

    model_config = {"from_attributes": True}


class SearchResultResponse(BaseModel):
    listings: list[ListingResponse]
    keyword: str | None = None
    selected_category_id: int | None = None
    selected_category_name: str = ""
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    condition: str | None = None
    sort: str | None = None
    total_count: int
    page_count: int
    current_page: int
    page_limit: int
    offset: int


class SearchFormRequest(BaseModel):
    keyword: str | None = None
    categories: int | None = None


class SellerDashboardResponse(BaseModel):
    listings: list[ListingResponse]
    messages: list[FlashMessageResponse] = []


class ModerationDashboardResponse(BaseModel):
    active: list[ListingResponse]
    inactive: list[ListingResponse]
    messages: list[FlashMessageResponse] = []


class CreateListingRequest(BaseModel):
    category_id: int
    name: str = Field(min_length=1, max_length=256)
    description: str = ""
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    condition: ListingCondition


class ListingCreatedResponse(BaseModel):
    id: int
    status: ListingStatus


class StatusHistoryEntryResponse(BaseModel):
    id: int
    from_status: ListingStatus | None
    to_status: ListingStatus
    transitioned_at: datetime
    triggered_by: str


class ListingHistoryResponse(BaseModel):
    listing_id: int
    history: list[StatusHistoryEntryResponse]
