"""
API response schemas for the FastAPI application.
Fields are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from catalog.search import Pagination
from catalog.stats import AuthorStats


class CamelModel(BaseModel):
    """Response model serialized with camelCase keys."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_encoders = {
            datetime: lambda v: v.isoformat()
        }


class AuthorResponse(CamelModel):
    """Author response model for API."""
    id: str = Field(..., description="Unique author identifier")
    name: str = Field(..., description="Author name")
    email: str = Field(..., description="Unique contact email")
    bio: Optional[str] = Field(None, description="Short biography")
    nationality: Optional[str] = Field(None, description="Nationality")
    birth_year: Optional[int] = Field(None, description="Year of birth")
    created_at: datetime = Field(..., description="Creation timestamp")


class AuthorSummary(CamelModel):
    """Minimal author reference."""
    id: str
    name: str


class AuthorContact(AuthorSummary):
    """Author reference attached to search results."""
    email: str


class BookResponse(CamelModel):
    """Book response model for API."""
    id: str = Field(..., description="Unique book identifier")
    title: str = Field(..., description="Book title")
    description: Optional[str] = Field(None, description="Book description")
    isbn: Optional[str] = Field(None, description="ISBN")
    published_year: Optional[int] = Field(None, description="Year of publication")
    genre: Optional[str] = Field(None, description="Genre")
    pages: Optional[int] = Field(None, description="Page count")
    author_id: str = Field(..., description="Owning author identifier")
    created_at: datetime = Field(..., description="Creation timestamp")


class BookWithAuthorResponse(BookResponse):
    """Book with its full author."""
    author: AuthorResponse


class BookSearchItem(BookResponse):
    """Book row in a search result."""
    author: Optional[AuthorContact] = None


class AuthorListItem(AuthorResponse):
    """Author row in the author listing."""
    book_count: int = Field(0, description="Number of books by this author")


class AuthorDetailResponse(AuthorResponse):
    """Author with their books, newest publication first."""
    books: List[BookResponse] = Field(default_factory=list)
    book_count: int = Field(0, description="Number of books by this author")


class AuthorBooksResponse(CamelModel):
    """Response for an author's book list."""
    author: AuthorSummary
    total_books: int
    books: List[BookResponse]


class AuthorStatsResponse(AuthorStats):
    """Statistics for one author."""
    author_id: str
    author_name: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class PaginationResponse(Pagination):
    """Pagination metadata on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class BookSearchResponse(CamelModel):
    """Response model for book search with pagination."""
    data: List[BookSearchItem] = Field(..., description="Books on this page")
    pagination: PaginationResponse


class MessageResponse(BaseModel):
    """Confirmation message."""
    message: str


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")


class HealthResponse(CamelModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
