"""Paging and sorting for Groundwork list endpoints.

Repositories turn `PaginationParams` into OFFSET/LIMIT and an ORDER BY on a
real table column. A `sort` naming anything else (a computed field such as an
employee's full name) is ignored in favour of the endpoint's natural order.
"""


from fastapi import Query
from pydantic import BaseModel


class PaginationParams:
    """FastAPI dependency for `?page=1&limit=20&sort=name&order=asc`.

    `sort` is optional: each list endpoint has its own natural ordering
    (projects by name, RFIs by number, time entries by date) which applies
    when the caller does not ask for one.
    """

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="Page number (1-based)"),
        limit: int = Query(default=20, ge=1, le=200, description="Items per page"),
        sort: str | None = Query(default=None, description="Sort field (snake_case column name)"),
        order: str = Query(default="desc", pattern="^(asc|desc)$", description="Sort order"),
    ):
        self.page = page
        self.limit = limit
        self.sort = sort
        self.order = order

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    pages: int

    model_config = {"populate_by_name": True}
