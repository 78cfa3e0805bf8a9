from typing import Any

from pydantic import BaseModel, Field


class FindOptions(BaseModel):
    """Options for a paginated find.

    Attributes:
        page_size: Number of items per page. Zero disables pagination and every matching item is returned.
        page: The 1-based page to fetch. Values below 2 fetch the first page.
        sorting: Ordered mapping of field name to sort direction (1 ascending, -1 descending).
    """

    page_size: int = Field(default=0, ge=0)
    page: int = Field(default=0, ge=0)
    sorting: dict[str, int] = Field(default_factory=dict)

    @property
    def skip(self) -> int:
        if self.page_size > 0 and self.page > 1:
            return (self.page - 1) * self.page_size
        return 0

    @property
    def limit(self) -> int:
        return self.page_size

    @property
    def sort(self) -> list[tuple[str, int]] | None:
        return list(self.sorting.items()) or None


class PaginationResult(BaseModel):
    """A page of items together with the numbers describing it."""

    items: list[Any] = Field(default_factory=list)
    total: int = 0
    page_size: int = 0
    current_page: int = 0
    number_of_pages: int = 0


def paginate(total: int, page: int = 0, page_size: int = 0) -> PaginationResult:
    """Compute the pagination descriptor for a query matching ``total`` items.

    With a page size of zero no pagination applies and the page fields stay at zero. Otherwise the number of pages is
    the ceiling of ``total / page_size`` and the current page is ``page`` when it is above 1, else 1.

    Example:
        .. code-block:: python

            from mongoseed.pagination import paginate

            res = paginate(total=25, page=3, page_size=10)
            assert (res.current_page, res.number_of_pages) == (3, 3)
    """
    result = PaginationResult(total=total)
    if page_size > 0:
        result.page_size = page_size
        result.number_of_pages = -(-total // page_size)
        result.current_page = page if page > 1 else 1
    return result
