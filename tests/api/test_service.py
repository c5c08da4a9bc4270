"""
Tests for the API database service with a mocked catalog store.
"""

import pytest

from api.database import APIDatabaseService
from catalog.errors import ConflictError, InvalidInputError, NotFoundError
from catalog.models import AuthorCreate, AuthorUpdate, BookCreate, BookUpdate
from catalog.search import BookSearchParams

AUTHOR_ID = "6650f1c2a3b4c5d6e7f80912"
BOOK_ID = "6650f1c2a3b4c5d6e7f80a01"


@pytest.fixture
def service(mock_store):
    """Create a service over the mocked store."""
    return APIDatabaseService(mock_store)


class TestAuthorService:
    """Test cases for author operations."""

    @pytest.mark.asyncio
    async def test_list_authors_with_counts(self, service, mock_store, sample_author):
        """Test each author carries its book count."""
        mock_store.list_authors.return_value = [sample_author]
        mock_store.count_books_by_author.return_value = {AUTHOR_ID: 3}

        authors = await service.list_authors()

        assert authors[0].book_count == 3
        assert authors[0].email == "gabo@example.com"

    @pytest.mark.asyncio
    async def test_create_author_prechecks_email(self, service, mock_store, sample_author):
        """An existing email is rejected before insert."""
        mock_store.find_author_by_email.return_value = sample_author

        with pytest.raises(ConflictError):
            await service.create_author(AuthorCreate(name="Otro", email="gabo@example.com"))

        mock_store.create_author.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_author_race_still_conflicts(self, service, mock_store):
        """A conflict raised by the store itself propagates."""
        mock_store.create_author.side_effect = ConflictError("dup", entity="author", field="email")

        with pytest.raises(ConflictError):
            await service.create_author(AuthorCreate(name="Ana", email="ana@example.com"))

    @pytest.mark.asyncio
    async def test_create_author_validates_before_store(self, service, mock_store):
        """Validation errors never touch the store."""
        with pytest.raises(InvalidInputError):
            await service.create_author(AuthorCreate(name="Ana"))

        mock_store.find_author_by_email.assert_not_awaited()
        mock_store.create_author.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_author(self, service, mock_store, sample_author):
        """Test creating an author returns the stored record."""
        mock_store.create_author.return_value = sample_author

        author = await service.create_author(AuthorCreate(name=sample_author.name, email=sample_author.email))

        assert author.id == AUTHOR_ID
        mock_store.create_author.assert_awaited_once_with(
            {"name": sample_author.name, "email": sample_author.email}
        )

    @pytest.mark.asyncio
    async def test_get_author_with_books(self, service, mock_store, sample_author, sample_books):
        """Test author detail includes books and count."""
        mock_store.get_author.return_value = sample_author
        mock_store.list_books_by_author.return_value = sample_books

        detail = await service.get_author(AUTHOR_ID)

        assert detail.book_count == 3
        assert [book.title for book in detail.books] == [book.title for book in sample_books]

    @pytest.mark.asyncio
    async def test_update_author_invalid_email(self, service, mock_store):
        """Test malformed email on update never reaches the store."""
        with pytest.raises(InvalidInputError):
            await service.update_author(AUTHOR_ID, AuthorUpdate(email="not-an-email"))

        mock_store.update_author.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_author_sends_only_changes(self, service, mock_store, sample_author):
        """Test only supplied fields are written."""
        mock_store.get_author.return_value = sample_author

        await service.update_author(AUTHOR_ID, AuthorUpdate(nationality="Mexicana"))

        mock_store.update_author.assert_awaited_once_with(AUTHOR_ID, {"nationality": "Mexicana"})

    @pytest.mark.asyncio
    async def test_author_books(self, service, mock_store, sample_author, sample_books):
        """Test author book listing shape."""
        mock_store.get_author.return_value = sample_author
        mock_store.list_books_by_author.return_value = sample_books

        result = await service.get_author_books(AUTHOR_ID)

        assert result.author.id == AUTHOR_ID
        assert result.author.name == sample_author.name
        assert result.total_books == 3

    @pytest.mark.asyncio
    async def test_author_stats(self, service, mock_store, sample_author, sample_books):
        """Test statistics carry the author identity."""
        mock_store.get_author.return_value = sample_author
        mock_store.list_books_by_author.return_value = sample_books

        stats = await service.get_author_stats(AUTHOR_ID)

        assert stats.author_id == AUTHOR_ID
        assert stats.author_name == sample_author.name
        assert stats.total_books == 3
        mock_store.list_books_by_author.assert_awaited_once_with(AUTHOR_ID, sort=[("published_year", 1)])

    @pytest.mark.asyncio
    async def test_author_stats_missing_author(self, service, mock_store):
        """Test stats for a missing author raise NotFoundError."""
        mock_store.get_author.side_effect = NotFoundError("missing", entity="author")

        with pytest.raises(NotFoundError):
            await service.get_author_stats(AUTHOR_ID)


class TestBookService:
    """Test cases for book operations."""

    @pytest.mark.asyncio
    async def test_create_book_requires_existing_author(self, service, mock_store):
        """Test creating a book for a missing author."""
        mock_store.get_author.side_effect = NotFoundError("missing", entity="author")

        with pytest.raises(NotFoundError) as exc_info:
            await service.create_book(BookCreate(title="Libro", author_id=AUTHOR_ID))

        assert exc_info.value.entity == "author"
        mock_store.create_book.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_book(self, service, mock_store, sample_author, sample_books):
        """Test creating a book returns it with its author."""
        mock_store.get_author.return_value = sample_author
        mock_store.create_book.return_value = sample_books[0]

        book = await service.create_book(BookCreate(title=sample_books[0].title, author_id=AUTHOR_ID))

        assert book.id == BOOK_ID
        assert book.author.name == sample_author.name

    @pytest.mark.asyncio
    async def test_update_book_checks_new_author(self, service, mock_store):
        """Test changing owner verifies the new author exists."""
        mock_store.get_author.side_effect = NotFoundError("missing", entity="author")

        with pytest.raises(NotFoundError):
            await service.update_book(BOOK_ID, BookUpdate(author_id="6650f1c2a3b4c5d6e7f809ff"))

        mock_store.update_book.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_book_short_title(self, service, mock_store):
        """Test short title on update is rejected before the store."""
        with pytest.raises(InvalidInputError):
            await service.update_book(BOOK_ID, BookUpdate(title="AB"))

        mock_store.update_book.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_search_uses_same_filter_for_count_and_page(self, service, mock_store, sample_author, sample_books):
        """Count and page queries receive the identical filter."""
        fantasy = [book for book in sample_books if book.genre == "Realismo mágico"]
        mock_store.count_books.return_value = len(fantasy)
        mock_store.find_books.return_value = fantasy
        mock_store.get_authors_by_ids.return_value = {AUTHOR_ID: sample_author}

        result = await service.search_books(BookSearchParams(genre="Realismo mágico"))

        count_filter = mock_store.count_books.await_args.args[0]
        page_filter = mock_store.find_books.await_args.args[0]
        assert count_filter == page_filter == {"$and": [{"genre": "Realismo mágico"}]}
        assert all(item.genre == "Realismo mágico" for item in result.data)
        assert result.pagination.total == 2
        assert result.data[0].author.email == sample_author.email
        mock_store.find_author_ids.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_search_by_author_name(self, service, mock_store):
        """Author name is resolved to ids before filtering books."""
        mock_store.find_author_ids.return_value = ["a1"]
        mock_store.count_books.return_value = 0
        mock_store.find_books.return_value = []
        mock_store.get_authors_by_ids.return_value = {}

        result = await service.search_books(BookSearchParams(author_name="gab", page=3, limit=5))

        mock_store.find_author_ids.assert_awaited_once_with({"name": {"$regex": "gab", "$options": "i"}})
        args = mock_store.find_books.await_args.args
        assert args[0] == {"$and": [{"author_id": {"$in": ["a1"]}}]}
        assert args[2] == 10
        assert args[3] == 5
        assert result.pagination.total_pages == 1
        assert result.pagination.has_prev is True
        assert result.pagination.has_next is False

    @pytest.mark.asyncio
    async def test_search_store_failure_propagates(self, service, mock_store):
        """Test store failures during search are re-raised."""
        mock_store.count_books.side_effect = RuntimeError("down")

        with pytest.raises(RuntimeError):
            await service.search_books(BookSearchParams())

    @pytest.mark.asyncio
    async def test_health_check(self, service, mock_store):
        """Test health check reports store failures."""
        assert (await service.health_check())["status"] == "healthy"

        mock_store.ping.side_effect = RuntimeError("down")
        health = await service.health_check()

        assert health["status"] == "unhealthy"
