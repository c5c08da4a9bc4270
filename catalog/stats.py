"""
Author statistics engine.

Computes descriptive statistics over one author's books in a single
pass. Nothing is persisted; results are built on every read.
"""

import math
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from .models import BookRecord


class BookYear(BaseModel):
    """Title and publication year of a book."""
    title: str
    year: Optional[int] = None


class BookPages(BaseModel):
    """Title and page count of a book."""
    title: str
    pages: int


class AuthorStats(BaseModel):
    """Aggregate statistics for an author's books."""
    total_books: int = 0
    first_book: Optional[BookYear] = None
    latest_book: Optional[BookYear] = None
    average_pages: int = 0
    genres: List[str] = Field(default_factory=list)
    longest_book: Optional[BookPages] = None
    shortest_book: Optional[BookPages] = None


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def compute_author_stats(books: Iterable[BookRecord]) -> AuthorStats:
    """
    Compute statistics for a sequence of books.

    Args:
        books: The author's books, in any order

    Returns:
        AuthorStats; every field degrades to null, zero or empty for
        an empty sequence
    """
    total = 0
    first: Optional[BookRecord] = None
    first_dated: Optional[BookRecord] = None
    latest: Optional[BookRecord] = None
    longest: Optional[BookRecord] = None
    shortest: Optional[BookRecord] = None
    pages_sum = 0
    pages_count = 0
    genres: List[str] = []

    for book in books:
        total += 1
        if first is None:
            first = book

        if book.published_year is not None:
            if first_dated is None or book.published_year < first_dated.published_year:
                first_dated = book

        # A missing year ranks as 0 for "latest".
        if latest is None or (book.published_year or 0) > (latest.published_year or 0):
            latest = book

        if book.pages is not None:
            pages_sum += book.pages
            pages_count += 1
            if longest is None or book.pages > longest.pages:
                longest = book
            if shortest is None or book.pages < shortest.pages:
                shortest = book

        if book.genre and book.genre not in genres:
            genres.append(book.genre)

    if first_dated is not None:
        first = first_dated

    return AuthorStats(
        total_books=total,
        first_book=BookYear(title=first.title, year=first.published_year) if first else None,
        latest_book=BookYear(title=latest.title, year=latest.published_year) if latest else None,
        average_pages=round_half_up(pages_sum / pages_count) if pages_count else 0,
        genres=genres,
        longest_book=BookPages(title=longest.title, pages=longest.pages) if longest else None,
        shortest_book=BookPages(title=shortest.title, pages=shortest.pages) if shortest else None,
    )
