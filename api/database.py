"""
Database service layer for the FastAPI application.
"""

from typing import Dict, List

import structlog

from api.models import (
    AuthorBooksResponse, AuthorDetailResponse, AuthorListItem, AuthorResponse,
    AuthorStatsResponse, AuthorSummary, AuthorContact, BookResponse,
    BookSearchItem, BookSearchResponse, BookWithAuthorResponse, PaginationResponse
)
from catalog.database import CatalogDatabase
from catalog.errors import ConflictError
from catalog.models import AuthorCreate, AuthorUpdate, BookCreate, BookUpdate
from catalog.search import (
    BookSearchParams, author_name_filter, build_book_filter, build_pagination, build_sort
)
from catalog.stats import compute_author_stats
from catalog.validators import (
    validate_author_create, validate_author_update,
    validate_book_create, validate_book_update
)

logger = structlog.get_logger(__name__)


class APIDatabaseService:
    """Catalog operations behind the HTTP handlers."""

    def __init__(self, store: CatalogDatabase):
        self.store = store

    # Authors

    async def list_authors(self) -> List[AuthorListItem]:
        """All authors, newest first, with their book counts."""
        authors = await self.store.list_authors()
        counts = await self.store.count_books_by_author()
        return [
            AuthorListItem(**author.model_dump(), book_count=counts.get(author.id, 0))
            for author in authors
        ]

    async def create_author(self, payload: AuthorCreate) -> AuthorResponse:
        """
        Create an author.

        The email pre-check gives a fast 409; the unique index still
        catches a concurrent insert of the same email.
        """
        data = validate_author_create(payload)

        existing = await self.store.find_author_by_email(data["email"])
        if existing:
            logger.warning("Author email already registered", author_id=existing.id)
            raise ConflictError("author email already exists", entity="author", field="email")

        author = await self.store.create_author(data)
        logger.info("Author created", author_id=author.id)
        return AuthorResponse(**author.model_dump())

    async def get_author(self, author_id: str) -> AuthorDetailResponse:
        """Author with books by publication year, newest first."""
        author = await self.store.get_author(author_id)
        books = await self.store.list_books_by_author(author_id)
        return AuthorDetailResponse(
            **author.model_dump(),
            books=[BookResponse(**book.model_dump()) for book in books],
            book_count=len(books),
        )

    async def update_author(self, author_id: str, payload: AuthorUpdate) -> AuthorDetailResponse:
        """Apply a partial update and return the author with their books."""
        changes = validate_author_update(payload)
        await self.store.update_author(author_id, changes)
        logger.info("Author updated", author_id=author_id, fields=sorted(changes))
        return await self.get_author(author_id)

    async def delete_author(self, author_id: str) -> None:
        """Delete an author and their books."""
        books_deleted = await self.store.delete_author(author_id)
        logger.info("Author deleted", author_id=author_id, books_deleted=books_deleted)

    async def get_author_books(self, author_id: str) -> AuthorBooksResponse:
        """Books of one author, newest publication first."""
        author = await self.store.get_author(author_id)
        books = await self.store.list_books_by_author(author_id)
        return AuthorBooksResponse(
            author=AuthorSummary(id=author.id, name=author.name),
            total_books=len(books),
            books=[BookResponse(**book.model_dump()) for book in books],
        )

    async def get_author_stats(self, author_id: str) -> AuthorStatsResponse:
        """Descriptive statistics over an author's books."""
        author = await self.store.get_author(author_id)
        books = await self.store.list_books_by_author(author_id, sort=[("published_year", 1)])
        stats = compute_author_stats(books)
        return AuthorStatsResponse(author_id=author.id, author_name=author.name, **stats.model_dump())

    # Books

    async def _with_author(self, book) -> BookWithAuthorResponse:
        author = await self.store.get_author(book.author_id)
        return BookWithAuthorResponse(**book.model_dump(), author=AuthorResponse(**author.model_dump()))

    async def create_book(self, payload: BookCreate) -> BookWithAuthorResponse:
        """Create a book for an existing author."""
        data = validate_book_create(payload)
        await self.store.get_author(data["author_id"])

        book = await self.store.create_book(data)
        logger.info("Book created", book_id=book.id, author_id=book.author_id)
        return await self._with_author(book)

    async def get_book(self, book_id: str) -> BookWithAuthorResponse:
        """Book with its author."""
        book = await self.store.get_book(book_id)
        return await self._with_author(book)

    async def update_book(self, book_id: str, payload: BookUpdate) -> BookWithAuthorResponse:
        """Apply a partial update; a new owner must exist."""
        changes = validate_book_update(payload)
        if "author_id" in changes:
            await self.store.get_author(changes["author_id"])

        book = await self.store.update_book(book_id, changes)
        logger.info("Book updated", book_id=book_id, fields=sorted(changes))
        return await self._with_author(book)

    async def delete_book(self, book_id: str) -> None:
        """Delete a book."""
        await self.store.delete_book(book_id)
        logger.info("Book deleted", book_id=book_id)

    async def search_books(self, params: BookSearchParams) -> BookSearchResponse:
        """
        Search books with filtering, sorting, and pagination.

        Args:
            params: Normalized search parameters

        Returns:
            BookSearchResponse with one page of books and pagination metadata
        """
        try:
            author_ids = None
            name_filter = author_name_filter(params)
            if name_filter is not None:
                author_ids = await self.store.find_author_ids(name_filter)

            # One filter object for both the count and the page query.
            filter_query = build_book_filter(params, author_ids)

            total = await self.store.count_books(filter_query)
            books = await self.store.find_books(
                filter_query, build_sort(params), params.skip, params.limit
            )
            authors = await self.store.get_authors_by_ids([book.author_id for book in books])

            items = []
            for book in books:
                author = authors.get(book.author_id)
                contact = AuthorContact(id=author.id, name=author.name, email=author.email) if author else None
                items.append(BookSearchItem(**book.model_dump(), author=contact))

            pagination = build_pagination(params.page, params.limit, total)
            return BookSearchResponse(data=items, pagination=PaginationResponse(**pagination.model_dump()))

        except Exception as e:
            logger.error("Failed to search books", error=str(e), query_params=params.model_dump())
            raise

    async def health_check(self) -> Dict:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        try:
            await self.store.ping()
            return {"status": "healthy"}
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e)
            }
