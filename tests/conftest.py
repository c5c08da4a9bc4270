"""
Pytest configuration and shared fixtures.
"""

import pytest
from datetime import datetime
from unittest.mock import AsyncMock

from api.database import APIDatabaseService
from catalog.database import CatalogDatabase
from catalog.models import AuthorRecord, BookRecord

AUTHOR_ID = "6650f1c2a3b4c5d6e7f80912"
BOOK_ID = "6650f1c2a3b4c5d6e7f80a01"


@pytest.fixture
def sample_author():
    """Create a sample author record."""
    return AuthorRecord(
        id=AUTHOR_ID,
        name="Gabriel García Márquez",
        email="gabo@example.com",
        bio="Colombian novelist",
        nationality="Colombiana",
        birth_year=1927,
        created_at=datetime(2024, 1, 15, 10, 30)
    )


@pytest.fixture
def sample_books():
    """Create sample books for one author, in insertion order."""
    return [
        BookRecord(
            id="6650f1c2a3b4c5d6e7f80a01",
            title="Cien años de soledad",
            isbn="978-0307474728",
            published_year=1967,
            genre="Realismo mágico",
            pages=471,
            author_id=AUTHOR_ID,
            created_at=datetime(2024, 1, 16)
        ),
        BookRecord(
            id="6650f1c2a3b4c5d6e7f80a02",
            title="El coronel no tiene quien le escriba",
            published_year=1961,
            genre="Novela corta",
            pages=92,
            author_id=AUTHOR_ID,
            created_at=datetime(2024, 1, 17)
        ),
        BookRecord(
            id="6650f1c2a3b4c5d6e7f80a03",
            title="El amor en los tiempos del cólera",
            published_year=1985,
            genre="Realismo mágico",
            pages=368,
            author_id=AUTHOR_ID,
            created_at=datetime(2024, 1, 18)
        ),
    ]


@pytest.fixture
def mock_store():
    """Create a mock catalog database."""
    store = AsyncMock(spec=CatalogDatabase)
    store.find_author_by_email.return_value = None
    store.count_books_by_author.return_value = {}
    store.list_books_by_author.return_value = []
    return store


@pytest.fixture
def mock_db_service():
    """Create a mock API database service."""
    return AsyncMock(spec=APIDatabaseService)
