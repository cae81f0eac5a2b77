from dataclasses import dataclass

from campus_market.domain.search.search_request import InvalidSearchRequestError


class PageOutOfRangeError(InvalidSearchRequestError):
    """The requested page does not exist; callers redirect to the home view."""

    def __init__(self, page: int, total_pages: int) -> None:
        self.page = page
        self.total_pages = total_pages
        super().__init__(f"Page {page} is outside 1..{total_pages}.")


@dataclass(frozen=True)
class PageWindow:
    limit: int
    offset: int
    current_page: int
    total_pages: int


def total_pages_for(total: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError("page_size must be positive.")
    return -(-total // page_size) if total > 0 else 0


def paginate(total: int, page: int, page_size: int) -> PageWindow:
    """
    Turn a total row count and a 1-indexed page into a limit/offset window.

    Pages below 1 are rejected outright, as is any page when nothing matched.
    """
    total_pages = total_pages_for(total, page_size)
    if page < 1 or page > total_pages:
        raise PageOutOfRangeError(page, total_pages)

    return PageWindow(
        limit=page_size,
        offset=(page - 1) * page_size,
        current_page=page,
        total_pages=total_pages,
    )
