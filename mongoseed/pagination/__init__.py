from mongoseed.pagination.pagination import FindOptions, PaginationResult, paginate

__all__ = ["FindOptions", "PaginationResult", "paginate"]
