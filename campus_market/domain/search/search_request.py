from dataclasses import dataclass
from decimal import Decimal


class InvalidSearchRequestError(Exception):
    """Raised when a search request cannot be served as asked."""


@dataclass(frozen=True)
class SearchRequest:
    """
    One catalog query, built per incoming request and never persisted.

    `condition` and `sort` carry the raw caller-supplied text; the query
    builder maps them onto its allow-lists.
    """

    keyword: str | None = None
    category_id: int | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    condition: str | None = None
    sort: str | None = None
    page: int = 1
    page_size: int = 10

    @property
    def normalized_keyword(self) -> str | None:
        if self.keyword is None:
            return None
        keyword = self.keyword.strip()
        return keyword or None
