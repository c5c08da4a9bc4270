"""
Book search engine: filter, sort and pagination construction.

The query is built once from request parameters. The same filter
document is handed to both the count and the find call so pagination
metadata always describes the returned page.
"""

import math
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field, validator

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


class SortBy(str, Enum):
    """Sort options for book search."""
    TITLE = "title"
    PUBLISHED_YEAR = "publishedYear"
    CREATED_AT = "createdAt"


class SortOrder(str, Enum):
    """Sort order options."""
    ASC = "asc"
    DESC = "desc"


SORT_FIELDS = {
    SortBy.TITLE: "title",
    SortBy.PUBLISHED_YEAR: "published_year",
    SortBy.CREATED_AT: "created_at",
}


def _to_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class BookSearchParams(BaseModel):
    """Normalized query parameters for book search."""
    search: Optional[str] = Field(None, description="Case-insensitive title substring")
    genre: Optional[str] = Field(None, description="Exact genre")
    author_name: Optional[str] = Field(None, description="Case-insensitive author name substring")
    sort_by: SortBy = Field(SortBy.CREATED_AT, description="Sort field")
    order: SortOrder = Field(SortOrder.DESC, description="Sort order")
    page: int = Field(DEFAULT_PAGE, ge=1, description="Page number")
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page")

    @validator("search", "genre", "author_name", pre=True)
    def blank_to_none(cls, v):
        """Treat empty strings as omitted filters."""
        if v is None:
            return None
        v = str(v)
        return v if v else None

    @validator("sort_by", pre=True)
    def default_sort_field(cls, v):
        """Fall back to creation time for unknown sort fields."""
        try:
            return SortBy(v)
        except ValueError:
            return SortBy.CREATED_AT

    @validator("order", pre=True)
    def default_sort_order(cls, v):
        """Fall back to descending for unknown directions."""
        try:
            return SortOrder(str(v).lower())
        except ValueError:
            return SortOrder.DESC

    @validator("page", pre=True)
    def floor_page(cls, v):
        """Pages start at 1."""
        return max(_to_int(v, DEFAULT_PAGE), 1)

    @validator("limit", pre=True)
    def clamp_limit(cls, v):
        """Clamp page size to [1, MAX_PAGE_SIZE]."""
        return min(max(_to_int(v, DEFAULT_PAGE_SIZE), 1), MAX_PAGE_SIZE)

    @property
    def skip(self) -> int:
        """Number of matching books before this page."""
        return (self.page - 1) * self.limit


class Pagination(BaseModel):
    """Pagination metadata for a search result."""
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    """Derive page counts and navigation flags from the matching total."""
    total_pages = max(math.ceil(total / limit), 1)
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


def contains_pattern(text: str) -> Dict[str, str]:
    """Case-insensitive substring match on a literal string."""
    return {"$regex": re.escape(text), "$options": "i"}


def author_name_filter(params: BookSearchParams) -> Optional[Dict[str, Any]]:
    """Filter on the ``authors`` collection for the author-name condition, if any."""
    if not params.author_name:
        return None
    return {"name": contains_pattern(params.author_name)}


def build_book_filter(
    params: BookSearchParams,
    author_ids: Optional[Sequence[Any]] = None
) -> Dict[str, Any]:
    """
    Build the conjunctive filter for the ``books`` collection.

    Args:
        params: Normalized search parameters
        author_ids: Ids of authors whose name matched ``author_name``;
            required when that filter is present

    Returns:
        ``{"$and": [...]}`` over supplied conditions only, or ``{}``
        when no condition was supplied
    """
    conditions: List[Dict[str, Any]] = []

    if params.search:
        conditions.append({"title": contains_pattern(params.search)})

    if params.genre:
        conditions.append({"genre": params.genre})

    if params.author_name:
        conditions.append({"author_id": {"$in": list(author_ids or [])}})

    if not conditions:
        return {}
    return {"$and": conditions}


def build_sort(params: BookSearchParams) -> List[tuple]:
    """Sort specification for the search cursor."""
    direction = 1 if params.order == SortOrder.ASC else -1
    return [(SORT_FIELDS[params.sort_by], direction), ("_id", direction)]
