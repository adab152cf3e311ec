"""
Common result models.

Generic paginated wrapper returned by search and id listings.

Dependencies: pydantic
System role: Uniform pagination shape across backends
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class PaginatedResult(BaseModel, Generic[T]):
    """
    Generic paginated result.

    When ``total`` is reported, ``total_pages == max(1, ceil(total / per_page))``
    and ``has_next_page == current_page < total_pages``. When the backend cannot
    count, ``total`` is None, ``total_pages`` is 1 and ``has_next_page`` comes
    from the driver (full page fetched, or a live paging cursor).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int | None = Field(default=None, description="Total matches, None when unknown")
    total_pages: int
    per_page: int
    current_page: int
    has_next_page: bool
    has_previous_page: bool
    items: list[T]
